# ============================================================================
# src/lab_charting/matching/patient_matcher.py
# ============================================================================
"""
Patient Matcher

Finds the registry patient a lab report belongs to.

Strategy:
1. Normalize the query name (strip prefixes, pull out ordinal)
2. Skip every candidate whose ordinal differs - twin 1 is never twin 2,
   however similar the names are
3. Score the rest by edit distance, keep the best (first seen wins ties)
4. score >= AUTO_SAVE_THRESHOLD -> AUTO_SAVE, otherwise INBOX

A document is matched in up to three passes, highest priority first:
mail subject, attachment filename, then the patient name the extraction
model read from the report itself. Subject and filename passes must clear
the auto-save threshold; the content pass only needs the lower
CONTENT_MATCH_FLOOR, but its classification still follows step 4.
"""

from typing import Dict, Iterable, Optional, Sequence
import logging

from ..config import ThresholdSettings
from ..core.context import MatchAction, MatchResult, NormalizedName, Patient
from .name_normalizer import DEFAULT_NAME_TABLES, NameTokenTables, normalize_name
from .similarity import similarity_score

logger = logging.getLogger(__name__)


class PatientMatcher:
    """Fuzzy patient-name matching with ordinal disambiguation."""

    def __init__(
        self,
        thresholds: ThresholdSettings,
        name_tables: NameTokenTables = DEFAULT_NAME_TABLES
    ):
        self.thresholds = thresholds
        self.name_tables = name_tables
        # Registry names are normalized once per matcher
        self._normalized_cache: Dict[str, NormalizedName] = {}

    def _normalize_candidate(self, name: str) -> NormalizedName:
        cached = self._normalized_cache.get(name)
        if cached is None:
            cached = normalize_name(name, self.name_tables)
            self._normalized_cache[name] = cached
        return cached

    def find_best_match(self, name: Optional[str], patients: Iterable[Patient]) -> MatchResult:
        """
        Classify the best-scoring candidate for a raw name.

        Returns:
            MatchResult; AUTO_SAVE only when a patient scored at or above
            the auto-save threshold. Candidates removed by the ordinal
            filter never influence patient or score.
        """
        query = normalize_name(name, self.name_tables)
        logger.debug(
            f"[MATCH] '{name}' -> '{query.canonical}' (ordinal: {query.ordinal})"
        )

        best: Optional[Patient] = None
        best_score = 0.0
        for patient in patients:
            candidate = self._normalize_candidate(patient.name)
            if candidate.ordinal != query.ordinal:
                continue

            score = similarity_score(query.canonical, candidate.canonical)
            if score > self.thresholds.NEAR_MATCH_LOG_THRESHOLD:
                logger.debug(
                    f"[MATCH] candidate '{patient.name}' -> '{candidate.canonical}' "
                    f"score {score:.1f}"
                )

            if score > best_score:
                best_score = score
                best = patient

        if best is not None and best_score >= self.thresholds.AUTO_SAVE_THRESHOLD:
            return MatchResult(action=MatchAction.AUTO_SAVE, patient=best, score=best_score)
        return MatchResult(action=MatchAction.INBOX, patient=best, score=best_score)

    def _accept(
        self,
        name: Optional[str],
        patients: Sequence[Patient],
        floor: float
    ) -> Optional[MatchResult]:
        if not name:
            return None
        result = self.find_best_match(name, patients)
        if result.patient is not None and result.score > floor:
            return result
        return None

    def match_header(self, name: Optional[str], patients: Sequence[Patient]) -> Optional[MatchResult]:
        """Subject or filename pass; None unless the score clears the auto-save threshold."""
        return self._accept(name, patients, self.thresholds.AUTO_SAVE_THRESHOLD)

    def match_content(self, name: Optional[str], patients: Sequence[Patient]) -> Optional[MatchResult]:
        """In-document name pass with the lowered acceptance floor."""
        return self._accept(name, patients, self.thresholds.CONTENT_MATCH_FLOOR)
