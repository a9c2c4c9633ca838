# ============================================================================
# src/lab_charting/config/extraction_config.py
# ============================================================================
"""
Extraction Service Settings
- Gemini API credentials and model
- Request timeout
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExtractionSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAB_CHARTING_", env_file=".env", extra="ignore", frozen=True
    )

    GEMINI_API_KEY: SecretStr = Field(
        default=SecretStr(""),
        description="API key for the generative language API"
    )
    GEMINI_MODEL: str = Field(
        default="gemini-2.5-flash",
        description="Model used for batched lab report extraction"
    )
    GEMINI_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the generative language API"
    )
    REQUEST_TIMEOUT: float = Field(
        default=180.0,
        gt=0,
        description="Per-request timeout in seconds for one extraction call"
    )
