# ============================================================================
# src/lab_charting/config/__init__.py
# ============================================================================
"""
Settings for the lab charting engine.

Settings are built once at the entry point and passed to components at
construction; components never read the environment themselves.
"""

from dataclasses import dataclass, field

from .base_config import StoreSettings
from .pipeline_config import PipelineSettings
from .extraction_config import ExtractionSettings
from .thresholds_config import ThresholdSettings
from .logging_config import LoggingSettings


@dataclass(frozen=True)
class AppSettings:
    """Immutable bundle of every settings group."""
    store: StoreSettings = field(default_factory=StoreSettings)
    pipeline: PipelineSettings = field(default_factory=PipelineSettings)
    extraction: ExtractionSettings = field(default_factory=ExtractionSettings)
    thresholds: ThresholdSettings = field(default_factory=ThresholdSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def load_settings() -> AppSettings:
    """Read all settings groups from the environment / .env file."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "load_settings",
    "StoreSettings",
    "PipelineSettings",
    "ExtractionSettings",
    "ThresholdSettings",
    "LoggingSettings",
]
