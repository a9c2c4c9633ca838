# ============================================================================
# src/lab_charting/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the lab charting engine.
"""


class LabChartingError(Exception):
    """Base exception for all lab charting errors."""
    pass


class ConfigurationError(LabChartingError):
    """Invalid or missing configuration."""
    pass


class ExtractionError(LabChartingError):
    """Extraction service call failed or returned an unusable payload."""
    pass


class ChartMergeError(LabChartingError):
    """Error merging values into a patient chart."""
    pass


class StoreError(LabChartingError):
    """Error reading or writing the document store."""
    pass


class DocumentNotFoundError(StoreError):
    """Requested document path does not exist."""
    pass


class SourceError(LabChartingError):
    """Error talking to the document source (mail store)."""
    pass


class LockError(LabChartingError):
    """Run lock could not be acquired or released cleanly."""
    pass
