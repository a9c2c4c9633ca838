"""
Extracted-value processing: sanitization and chart-bucket classification.
"""

from .tables import ParameterTables, DEFAULT_PARAMETER_TABLES
from .value_sanitizer import ValueSanitizer, sanitize_report
from .parameter_classifier import ParameterClassifier

__all__ = [
    "ParameterTables",
    "DEFAULT_PARAMETER_TABLES",
    "ValueSanitizer",
    "sanitize_report",
    "ParameterClassifier",
]
