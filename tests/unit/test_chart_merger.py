# ============================================================================
# FILE: tests/unit/test_chart_merger.py
# ============================================================================
"""
Unit tests for chart merging
"""

import pytest

from src.lab_charting.charting.chart_merger import ChartMerger, is_blank_static
from src.lab_charting.stores import InMemoryDocumentStore
from src.lab_charting.stores.repositories import ChartRepository
from src.lab_charting.utils.exceptions import ChartMergeError, StoreError


@pytest.fixture
def charts(settings):
    return ChartRepository(InMemoryDocumentStore(), settings.store)


@pytest.fixture
def merger(charts):
    return ChartMerger(charts)


def test_first_write_creates_chart_with_default_rows(merger, charts):
    outcome = merger.merge("p1", {"Hb": "12", "Ferritin": "200"}, "2024-03-01")

    assert outcome.created_chart
    assert outcome.date_key == "2024-03-01"
    assert outcome.new_rows == ["Ferritin"]

    chart = charts.load("p1")
    assert [r.label for r in chart.rows] == ["Hb", "TLC", "Platelets", "CRP", "Na/K/Cl", "Ferritin"]
    assert chart.dates == ["2024-03-01"]
    assert chart.cell("Hb", "2024-03-01") == "12"
    assert chart.find_row("Ferritin").category == "Investigations"


def test_identical_values_reapplied_stay_in_same_column(merger, charts):
    merger.merge("p1", {"Hb": "12"}, "2024-03-01")
    outcome = merger.merge("p1", {"Hb": "12"}, "2024-03-01")

    assert outcome.date_key == "2024-03-01"
    assert not outcome.created_chart
    assert charts.load("p1").dates == ["2024-03-01"]


def test_conflict_goes_to_suffixed_column(merger, charts):
    merger.merge("p1", {"Hb": "12"}, "2024-03-01")
    outcome = merger.merge("p1", {"Hb": "11"}, "2024-03-01")

    chart = charts.load("p1")
    assert outcome.date_key == "2024-03-01 (2)"
    assert chart.cell("Hb", "2024-03-01") == "12"
    assert chart.cell("Hb", "2024-03-01 (2)") == "11"
    assert chart.dates == ["2024-03-01", "2024-03-01 (2)"]


def test_dates_kept_sorted(merger, charts):
    merger.merge("p1", {"Hb": "12"}, "2024-03-05")
    merger.merge("p1", {"Hb": "11"}, "2024-03-01")
    merger.merge("p1", {"Hb": "10"}, "2024-03-03")
    assert charts.load("p1").dates == ["2024-03-01", "2024-03-03", "2024-03-05"]


def test_every_cell_has_a_column(merger, charts):
    merger.merge("p1", {"Hb": "12", "CRP": "1"}, "2024-03-01")
    merger.merge("p1", {"Hb": "13"}, "2024-03-01")
    merger.merge("p1", {"Blood CS": "No growth"}, "2024-03-04")
    chart = charts.load("p1")
    for row in chart.rows:
        assert set(row.data) <= set(chart.dates)


def test_static_updates_skip_blank_and_dash(merger, charts):
    merger.merge("p1", {}, "2024-03-01", {"bloodGroup": "O +ve", "g6pd": "Normal"})
    outcome = merger.merge("p1", {}, "2024-03-02", {"bloodGroup": "-", "g6pd": " "})

    chart = charts.load("p1")
    assert chart.static == {"bloodGroup": "O +ve", "g6pd": "Normal"}
    assert outcome.static_written == {}


def test_static_only_merge_adds_no_column(merger, charts):
    merger.merge("p1", {}, "2024-03-01", {"g6pd": "Deficient"})
    chart = charts.load("p1")
    assert chart.dates == []
    assert chart.static == {"g6pd": "Deficient"}


def test_is_blank_static():
    assert is_blank_static(None)
    assert is_blank_static("")
    assert is_blank_static(" - ")
    assert not is_blank_static("AB -ve")


class FailingCharts:
    def __init__(self, fail_on):
        self.fail_on = fail_on

    def load(self, patient_id):
        if self.fail_on == "load":
            raise StoreError("disk gone")
        return None

    def save(self, patient_id, chart):
        raise StoreError("read-only")


@pytest.mark.parametrize("fail_on", ["load", "save"])
def test_store_errors_become_merge_errors(fail_on):
    with pytest.raises(ChartMergeError):
        ChartMerger(FailingCharts(fail_on)).merge("p1", {"Hb": "12"}, "2024-03-01")
