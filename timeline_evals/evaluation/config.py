from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from timeline_evals.scenarios.models import DEFAULT_TIMEOUT_MS


@dataclass(frozen=True)
class EvalConfig:
    host: str = "127.0.0.1"
    port: int = 8010
    scenarios_dir: Optional[str] = None
    max_workers: int = 4
    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: str = "INFO"


def load_eval_config() -> EvalConfig:
    return EvalConfig(
        host=os.getenv("EVALS_HOST", EvalConfig.host),
        port=int(os.getenv("EVALS_PORT", str(EvalConfig.port))),
        scenarios_dir=os.getenv("EVALS_SCENARIOS_DIR") or None,
        max_workers=max(1, int(os.getenv("EVALS_MAX_WORKERS", str(EvalConfig.max_workers)))),
        default_timeout_ms=int(os.getenv("EVALS_DEFAULT_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
        log_level=os.getenv("EVALS_LOG_LEVEL", EvalConfig.log_level),
    )
