# ============================================================================
# src/lab_charting/stores/field_codec.py
# ============================================================================
"""
Typed-field wire format

Documents are stored the way the dashboard's document database exchanges
them: every value wrapped in a type tag.

    {"fields": {
        "name":  {"stringValue": "Baby of Priya"},
        "serial": {"integerValue": "12"},
        "dates": {"arrayValue": {"values": [{"stringValue": "2024-03-01"}]}},
        "static": {"mapValue": {"fields": {"g6pd": {"stringValue": "Normal"}}}}
    }}

Only this module and the codecs built on it see the wrappers.
"""

from typing import Any, Dict, Optional


def encode_value(value: Any) -> Dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, dict):
        return {"mapValue": {"fields": {str(k): encode_value(v) for k, v in value.items()}}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Cannot encode value of type {type(value).__name__}")


def decode_value(wrapped: Any) -> Any:
    """Unwrap one typed value; unknown or malformed wrappers decode to None."""
    if not isinstance(wrapped, dict):
        return None
    if "stringValue" in wrapped:
        return wrapped["stringValue"]
    if "integerValue" in wrapped:
        try:
            return int(wrapped["integerValue"])
        except (TypeError, ValueError):
            return None
    if "doubleValue" in wrapped:
        return wrapped["doubleValue"]
    if "booleanValue" in wrapped:
        return wrapped["booleanValue"]
    if "timestampValue" in wrapped:
        return wrapped["timestampValue"]
    if "nullValue" in wrapped:
        return None
    if "mapValue" in wrapped:
        return decode_fields(wrapped["mapValue"])
    if "arrayValue" in wrapped:
        items = (wrapped["arrayValue"] or {}).get("values") or []
        return [decode_value(v) for v in items]
    return None


def encode_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {"fields": {str(k): encode_value(v) for k, v in payload.items()}}


def decode_fields(document: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(document, dict):
        return {}
    fields = document.get("fields") or {}
    return {k: decode_value(v) for k, v in fields.items()}
