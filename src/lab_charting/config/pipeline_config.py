# ============================================================================
# src/lab_charting/config/pipeline_config.py
# ============================================================================
"""
Pipeline Settings
- Mail query and completion labels
- Per-run caps (threads, extraction sub-batch size)
- Wall-clock budget and inter-batch pause
- Run lock timing
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAB_CHARTING_", env_file=".env", extra="ignore", frozen=True
    )

    EMAIL_QUERY: str = Field(
        default="has:attachment -label:Charted",
        description="Document source query selecting unprocessed threads"
    )
    COMPLETION_LABEL: str = Field(
        default="Charted",
        description="Label marking a thread whose documents were fully processed"
    )
    LEGACY_LABEL: str = Field(
        default="NICU_PROCESSED",
        description="Older completion label, removed when the new one is applied"
    )
    EMAIL_BATCH_SIZE: int = Field(
        default=15,
        ge=1,
        description="Maximum threads fetched per run"
    )
    EXTRACTION_BATCH_SIZE: int = Field(
        default=10,
        ge=1,
        description="Documents sent per extraction call"
    )
    MAX_EXECUTION_SECONDS: float = Field(
        default=240.0,
        gt=0,
        description="Wall-clock budget per run; no new threads are scanned after it"
    )
    BATCH_PAUSE_SECONDS: float = Field(
        default=30.0,
        ge=0,
        description="Pause between extraction sub-batches"
    )
    LOCK_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        ge=0,
        description="Bounded wait for the run lock before skipping the run"
    )
    LOCK_LEASE_SECONDS: float = Field(
        default=600.0,
        gt=0,
        description="Age after which a run lock held by a crashed run is considered stale"
    )
