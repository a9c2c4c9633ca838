# ============================================================================
# src/lab_charting/config/thresholds_config.py
# ============================================================================
"""
Match Thresholds
- Auto-save acceptance
- Lowered floor for the in-document patient name pass
- Near-match diagnostic logging
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ThresholdSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAB_CHARTING_", env_file=".env", extra="ignore", frozen=True
    )

    AUTO_SAVE_THRESHOLD: float = Field(
        default=75.0,
        ge=0.0, le=100.0,
        description="Minimum similarity for a match to be written without review"
    )
    CONTENT_MATCH_FLOOR: float = Field(
        default=50.0,
        ge=0.0, le=100.0,
        description="Acceptance floor for the extracted patient-name pass"
    )
    NEAR_MATCH_LOG_THRESHOLD: float = Field(
        default=50.0,
        ge=0.0, le=100.0,
        description="Candidates scoring above this are logged for debugging"
    )

    @model_validator(mode="after")
    def _check_ordering(self):
        if self.CONTENT_MATCH_FLOOR >= self.AUTO_SAVE_THRESHOLD:
            raise ValueError("CONTENT_MATCH_FLOOR must be below AUTO_SAVE_THRESHOLD")
        return self
