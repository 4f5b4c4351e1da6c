"""Mini README: Centralised configuration model and helpers for SplitLedger.

Structure:
    * SplitLedgerSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read ``SPLITLEDGER_*`` environment variables
    (or a local ``.env`` file). The settings are validated once and cached
    for the lifetime of the process.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class SplitLedgerSettings(BaseSettings):
    """Runtime configuration for the SplitLedger engine and CLI."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level name (DEBUG, INFO, WARNING, ERROR).",
    )
    currency_code: str = Field(
        "USD",
        description="ISO 4217 code shown next to formatted amounts.",
    )
    data_file: Optional[Path] = Field(
        None,
        description="Default JSON group file read by the CLI when no path is given.",
    )

    class Config:
        env_prefix = "SPLITLEDGER_"
        env_file = ".env"
        case_sensitive = False

    @validator("log_level", pre=True)
    def _normalise_log_level(cls, value: object) -> str:
        """Accept any casing but only names the logging module knows."""

        level = str(value).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @validator("currency_code", pre=True)
    def _normalise_currency(cls, value: object) -> str:
        code = str(value).strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Currency code must be three letters, got {value!r}")
        return code

    @validator("data_file", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser()


@lru_cache()
def get_settings() -> SplitLedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return SplitLedgerSettings()
