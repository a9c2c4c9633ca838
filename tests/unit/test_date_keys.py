# ============================================================================
# FILE: tests/unit/test_date_keys.py
# ============================================================================
"""
Unit tests for date-key collision resolution
"""

from src.lab_charting.charting.date_keys import (
    has_conflict,
    resolve_date_key,
    suffixed_date_key,
)
from src.lab_charting.core.context import ChartDocument, ChartRow


def chart_with(cells):
    """cells: {date_key: {label: value}}"""
    chart = ChartDocument.with_default_rows()
    for date_key, values in cells.items():
        chart.add_date(date_key)
        for label, value in values.items():
            chart.ensure_row(label).data[date_key] = value
    return chart


def test_suffix():
    assert suffixed_date_key("2024-03-01", 2) == "2024-03-01 (2)"


def test_new_date_used_as_is():
    chart = chart_with({})
    assert resolve_date_key(chart, {"Hb": "12"}, "2024-03-01") == "2024-03-01"


def test_identical_values_do_not_conflict():
    chart = chart_with({"2024-03-01": {"Hb": "12"}})
    assert not has_conflict(chart, {"Hb": "12"}, "2024-03-01")
    assert resolve_date_key(chart, {"Hb": "12"}, "2024-03-01") == "2024-03-01"


def test_new_parameter_on_existing_date_does_not_conflict():
    chart = chart_with({"2024-03-01": {"Hb": "12"}})
    assert resolve_date_key(chart, {"CRP": "4"}, "2024-03-01") == "2024-03-01"


def test_blank_cell_does_not_conflict():
    chart = chart_with({"2024-03-01": {"Hb": "  "}})
    assert not has_conflict(chart, {"Hb": "11"}, "2024-03-01")


def test_conflict_allocates_suffix():
    chart = chart_with({"2024-03-01": {"Hb": "12"}})
    assert resolve_date_key(chart, {"Hb": "11"}, "2024-03-01") == "2024-03-01 (2)"


def test_suffixes_are_dense():
    chart = chart_with({
        "2024-03-01": {"Hb": "12"},
        "2024-03-01 (2)": {"Hb": "11"},
    })
    assert resolve_date_key(chart, {"Hb": "10"}, "2024-03-01") == "2024-03-01 (3)"


def test_existing_suffix_reused_when_compatible():
    chart = chart_with({
        "2024-03-01": {"Hb": "12"},
        "2024-03-01 (2)": {"Hb": "11"},
    })
    assert resolve_date_key(chart, {"Hb": "11", "CRP": "3"}, "2024-03-01") == "2024-03-01 (2)"


def test_row_missing_means_no_conflict():
    chart = ChartDocument(dates=["2024-03-01"], rows=[ChartRow(label="Hb", data={"2024-03-01": "12"})])
    assert not has_conflict(chart, {"SGPT": "40"}, "2024-03-01")
