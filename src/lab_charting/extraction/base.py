# ============================================================================
# src/lab_charting/extraction/base.py
# ============================================================================
"""
Base Extraction Client Interface

An extraction client turns a batch of PDF lab reports into one JSON object
per report (see ExtractedReport.from_dict for the expected shape).
Supported backends:
- gemini: Google Generative Language API
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
import json
import logging

from json_repair import repair_json

from ..utils.exceptions import ExtractionError


@dataclass(frozen=True)
class ExtractionDocument:
    """One PDF handed to the extraction service."""
    filename: str
    content: bytes
    mime_type: str = "application/pdf"


class BaseExtractionClient(ABC):
    """
    Abstract base class for extraction clients.

    All backends must implement:
    - extract_batch(): Async batch extraction, one result object per document
    - health_check(): Verify backend is available
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self._batch_count = 0
        self._document_count = 0

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier."""
        pass

    @abstractmethod
    async def extract_batch(
        self,
        documents: Sequence[ExtractionDocument],
        instructions: str = ""
    ) -> List[Dict[str, Any]]:
        """
        Extract every document in one service call.

        Args:
            documents: PDFs with their filenames
            instructions: Optional override rules appended to the prompt

        Returns:
            List of report dicts; callers match them back by filename

        Raises:
            ExtractionError: on transport, API or payload errors
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """
        Returns:
            {
                "healthy": bool,
                "model": str,
                "details": str,
                "models": List[str]
            }
        """
        pass

    async def close(self):
        """Release network resources (no-op by default)."""
        return None

    def parse_report_array(self, response_text: str) -> List[Dict[str, Any]]:
        """
        Parse the model's JSON array of reports.

        Uses json_repair as fallback for malformed JSON (trailing commas,
        truncated output, stray prose). Non-object elements are dropped.

        Raises:
            ExtractionError: if no JSON array can be recovered
        """
        if not response_text or not response_text.strip():
            raise ExtractionError("Extraction service returned an empty response")

        parsed: Optional[Any]
        try:
            parsed = json.loads(response_text.strip())
        except json.JSONDecodeError:
            parsed = None

        if parsed is None:
            try:
                parsed = repair_json(response_text, return_objects=True)
                self.logger.debug("json_repair fixed extraction response")
            except Exception as e:
                raise ExtractionError(f"Unparseable extraction response: {e}") from e

        # A single report may come back unwrapped
        if isinstance(parsed, dict):
            parsed = [parsed]

        if not isinstance(parsed, list):
            raise ExtractionError(
                f"Extraction response is not a JSON array: {response_text[:200]}"
            )

        reports = [item for item in parsed if isinstance(item, dict)]
        if len(reports) != len(parsed):
            self.logger.warning(
                f"Dropped {len(parsed) - len(reports)} non-object entries from extraction response"
            )
        return reports

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "model": self.model_name,
            "batches": self._batch_count,
            "documents": self._document_count,
        }
