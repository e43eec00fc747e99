from __future__ import annotations

import os
from typing import Any, Dict

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_SWEEP_INTERVAL_SECONDS = 60.0

# env var -> StoreSettings field
ENV_FIELDS = {
    "MEMORYDB_SWEEP_INTERVAL_SECONDS": "sweep_interval_seconds",
}


class StoreSettings(BaseModel):
    """Tunables for a MemoryDB instance."""

    sweep_interval_seconds: float = Field(
        DEFAULT_SWEEP_INTERVAL_SECONDS,
        gt=0,
        description="Seconds between background sweeps of expired keys.",
    )

    @classmethod
    def from_env(cls) -> "StoreSettings":
        load_dotenv()
        values: Dict[str, Any] = {}
        for env_name, field_name in ENV_FIELDS.items():
            raw = os.getenv(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()
        return cls(**values)
