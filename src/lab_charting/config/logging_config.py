# ============================================================================
# src/lab_charting/config/logging_config.py
# ============================================================================
"""
Logging & Audit Settings
- Log level and destination
- Audit trail
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAB_CHARTING_", env_file=".env", extra="ignore", frozen=True
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_FILE: Optional[Path] = Field(
        default=None,
        description="Optional log file in addition to stdout"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit JSON log lines"
    )
    ENABLE_AUDIT_TRAIL: bool = Field(
        default=True,
        description="Record per-document routing decisions in the audit database"
    )
