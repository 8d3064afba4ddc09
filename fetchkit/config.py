# /fetchkit/config.py
from __future__ import annotations

import os

from pydantic import BaseModel


class Settings(BaseModel):
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_JSON: bool = os.getenv("LOG_JSON", "false").lower() == "true"

    # Batch fan-out; 0 means one task per URL with no gate
    BATCH_CONCURRENCY: int = int(os.getenv("BATCH_CONCURRENCY", "0"))


settings = Settings()
