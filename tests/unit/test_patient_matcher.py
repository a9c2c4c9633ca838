# ============================================================================
# FILE: tests/unit/test_patient_matcher.py
# ============================================================================
"""
Unit tests for patient matching
"""

import logging

import pytest

from src.lab_charting.core.context import MatchAction, MatchResult, Patient
from src.lab_charting.matching.patient_matcher import PatientMatcher


@pytest.fixture
def matcher(thresholds):
    return PatientMatcher(thresholds)


def test_exact_match_auto_saves(matcher, patients):
    result = matcher.find_best_match("Priya Sharma", patients)
    assert result.action == MatchAction.AUTO_SAVE
    assert result.patient.id == "p1"
    assert result.score == 100.0


def test_ordinal_disambiguates_twins(matcher, patients):
    first = matcher.find_best_match("Baby of Anjali Verma 1st", patients)
    second = matcher.find_best_match("Anjali Verma (2)", patients)
    assert first.patient.id == "p2"
    assert second.patient.id == "p3"


def test_no_ordinal_never_matches_twin(matcher, patients):
    # Both twins carry an ordinal; an unmarked name has no eligible candidate
    result = matcher.find_best_match("Anjali Verma", [p for p in patients if p.id in ("p2", "p3")])
    assert result == MatchResult(MatchAction.INBOX, None, 0.0)


def test_low_score_goes_to_inbox_with_best_candidate(matcher, patients):
    result = matcher.find_best_match("Rahul Sinha", patients)
    assert result.action == MatchAction.INBOX
    assert result.patient.id == "p4"
    assert 50 < result.score < 75


def test_empty_registry(matcher):
    assert matcher.find_best_match("Priya Sharma", []) == MatchResult.no_match()


def test_first_candidate_wins_ties(matcher):
    twins = [Patient(id="a", name="Rahul Mehta"), Patient(id="b", name="Rahul Mehta")]
    assert matcher.find_best_match("Rahul Mehta", twins).patient.id == "a"


def test_threshold_boundary_is_inclusive(patients):
    from src.lab_charting.config import ThresholdSettings

    # "rahul mehta" vs "rahul mehtx": 1 edit over 11 chars = 90.9
    strict = PatientMatcher(ThresholdSettings(AUTO_SAVE_THRESHOLD=100.0, CONTENT_MATCH_FLOOR=50.0))
    assert strict.find_best_match("Rahul Mehta", patients).is_auto_save
    assert not strict.find_best_match("Rahul Mehtx", patients).is_auto_save


def test_near_matches_logged_at_debug(matcher, patients, caplog):
    with caplog.at_level(logging.DEBUG, logger="src.lab_charting.matching.patient_matcher"):
        matcher.find_best_match("Rahul Sinha", patients)
    assert any("Rahul Mehta" in r.getMessage() for r in caplog.records)
    assert all(r.levelno == logging.DEBUG for r in caplog.records)


# ----------------------------------------------------------------------------
# Header and content passes
# ----------------------------------------------------------------------------

def test_subject_pass(matcher, patients):
    result = matcher.match_header("Laboratory Report Rahul Mehta", patients)
    assert result.patient.id == "p4"
    assert matcher.match_header("Fwd: results", patients) is None


def test_filename_pass(matcher, patients):
    result = matcher.match_header("Priya-Sharma", patients)
    assert result.patient.id == "p1"


def test_header_pass_requires_strictly_above_threshold(matcher, patients):
    # "rahul mishra" vs "rahul mehta": 3 edits over 12 chars = 75.0
    exact = matcher.find_best_match("Rahul Mishra", patients)
    assert exact.score == 75.0
    assert exact.is_auto_save
    assert matcher.match_header("Rahul Mishra", patients) is None
    assert matcher.match_header(None, patients) is None


def test_content_pass_keeps_auto_save_classification(matcher, patients):
    result = matcher.match_content("Rahul Mishra", patients)
    assert result.patient.id == "p4"
    assert result.action == MatchAction.AUTO_SAVE


def test_content_pass_lower_floor(matcher, patients):
    result = matcher.match_content("Rahul Sinha", patients)
    assert result.patient.id == "p4"
    assert result.action == MatchAction.INBOX


def test_content_pass_rejects_low_scores(matcher, patients):
    assert matcher.match_content("Zzz Qqq", patients) is None
    assert matcher.match_content("", patients) is None
