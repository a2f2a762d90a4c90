from typing import Optional

import uvicorn

from timeline_evals.common.local_bind import ensure_local_bind
from timeline_evals.common.log import configure_logging
from timeline_evals.evaluation.app import app
from timeline_evals.evaluation.config import load_eval_config


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    config = load_eval_config()
    configure_logging(config.log_level)
    bind_host = host or config.host
    ensure_local_bind(bind_host)
    uvicorn.run(app, host=bind_host, port=port or config.port)


if __name__ == "__main__":
    run()
