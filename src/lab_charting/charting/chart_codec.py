# ============================================================================
# src/lab_charting/charting/chart_codec.py
# ============================================================================
"""
ChartDocument <-> stored document conversion.
"""

from typing import Any, Dict, Optional
import logging

from ..constants import DEFAULT_CATEGORY
from ..core.context import ChartDocument, ChartRow
from ..stores.field_codec import decode_fields, encode_fields

logger = logging.getLogger(__name__)


def _as_text_map(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(k): v if isinstance(v, str) else str(v) for k, v in raw.items() if v is not None}


class ChartCodec:

    @staticmethod
    def encode(chart: ChartDocument) -> Dict[str, Any]:
        return encode_fields({
            "dates": list(chart.dates),
            "rows": [
                {"label": row.label, "category": row.category, "data": dict(row.data)}
                for row in chart.rows
            ],
            "static": dict(chart.static),
        })

    @staticmethod
    def decode(document: Optional[Dict[str, Any]]) -> ChartDocument:
        """Tolerates missing wrappers; rows without a label are dropped."""
        fields = decode_fields(document)

        dates = [d for d in (fields.get("dates") or []) if isinstance(d, str)]

        rows = []
        for raw_row in fields.get("rows") or []:
            if not isinstance(raw_row, dict) or not raw_row.get("label"):
                logger.warning(f"Skipping malformed chart row: {raw_row!r}")
                continue
            rows.append(ChartRow(
                label=str(raw_row["label"]),
                category=raw_row.get("category") or DEFAULT_CATEGORY,
                data=_as_text_map(raw_row.get("data")),
            ))

        return ChartDocument(
            dates=dates,
            rows=rows,
            static=_as_text_map(fields.get("static")),
        )
