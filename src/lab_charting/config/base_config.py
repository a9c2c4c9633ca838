# ============================================================================
# src/lab_charting/config/base_config.py
# ============================================================================
"""
Store Configuration
- SQLite database location
- Collection / document paths inside the document store
- Audit trail database
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAB_CHARTING_", env_file=".env", extra="ignore", frozen=True
    )

    DB_PATH: Path = Field(
        default=Path("data/lab_charting.db"),
        description="SQLite database backing the document store and run lock"
    )
    AUDIT_DB_PATH: Path = Field(
        default=Path("data/audit.db"),
        description="SQLite database for the run audit trail"
    )
    PATIENTS_PATH: str = Field(
        default="public/data/patients",
        description="Collection holding the patient registry"
    )
    CHARTS_PATH: str = Field(
        default="public/data/medical_charts",
        description="Collection holding one chart document per patient id"
    )
    INBOX_PATH: str = Field(
        default="public/data/lab_inbox",
        description="Collection receiving review-queue items"
    )
    NOTIFICATIONS_PATH: str = Field(
        default="public/data/notifications",
        description="Collection receiving notifications"
    )
    INSTRUCTIONS_PATH: str = Field(
        default="config/extraction_instructions",
        description="Single document carrying extraction instruction overrides"
    )

    def chart_path(self, patient_id: str) -> str:
        """Document path of a patient's chart"""
        return f"{self.CHARTS_PATH}/{patient_id}"

    def create_directories(self):
        """Create parent directories for the SQLite databases"""
        for db_path in (self.DB_PATH, self.AUDIT_DB_PATH):
            db_path.parent.mkdir(parents=True, exist_ok=True)
