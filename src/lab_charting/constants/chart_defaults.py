# ============================================================================
# src/lab_charting/constants/chart_defaults.py
# ============================================================================
"""
Chart layout defaults shared with the dashboard frontend.
"""

from typing import Tuple

DEFAULT_CATEGORY = "Investigations"

# Rows every new chart starts with (must match the frontend)
DEFAULT_ROW_LABELS: Tuple[str, ...] = ("Hb", "TLC", "Platelets", "CRP", "Na/K/Cl")

# Static updates carrying these values never overwrite a known value
BLANK_STATIC_VALUES: Tuple[str, ...] = ("", "-")

ALTERNATE_COLUMN_START = 2
