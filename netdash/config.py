"""Runtime settings, read from ``NETDASH_*`` environment variables."""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "NETDASH_"


class Settings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=3001, ge=1, le=65535)

    # speed test
    speedtest_interval: float = Field(default=600.0, gt=0)  # seconds between scheduled runs
    speedtest_command: list[str] = Field(default_factory=lambda: ["networkQuality", "-c", "-s"])
    speedtest_timeout: float = Field(default=120.0, gt=0)
    latency_host: str = "8.8.8.8"
    latency_count: int = Field(default=4, ge=1)

    # scan
    probe_timeout: int = Field(default=1, ge=1)
    command_timeout: float = Field(default=15.0, gt=0)
    registry_file: Optional[Path] = None

    @field_validator("speedtest_command", mode="before")
    @classmethod
    def _split_command(cls, value: Any) -> Any:
        if isinstance(value, str):
            return shlex.split(value)
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from the environment; non-``None`` overrides win."""
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            env_val = os.getenv(ENV_PREFIX + name.upper())
            if env_val is not None and env_val != "":
                values[name] = env_val
        if values:
            logger.debug(f"Settings from environment: {sorted(values)}")
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
