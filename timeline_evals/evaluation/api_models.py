from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class SuiteOptionsModel(BaseModel):
    max_workers: Optional[int] = Field(default=None, ge=1)


class SuiteEvaluateRequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    traces: Dict[str, Dict[str, Any]]
    options: Optional[SuiteOptionsModel] = None
