# ============================================================================
# src/lab_charting/utils/__init__.py
# ============================================================================
"""
Utility modules for the lab charting engine.
"""

from .exceptions import (
    LabChartingError,
    ConfigurationError,
    ExtractionError,
    ChartMergeError,
    StoreError,
    DocumentNotFoundError,
    SourceError,
    LockError,
)

from .logging import (
    setup_logging,
    JsonFormatter,
    LogContext,
    log_performance,
)

__all__ = [
    # Exceptions
    'LabChartingError',
    'ConfigurationError',
    'ExtractionError',
    'ChartMergeError',
    'StoreError',
    'DocumentNotFoundError',
    'SourceError',
    'LockError',
    # Logging
    'setup_logging',
    'JsonFormatter',
    'LogContext',
    'log_performance',
]
