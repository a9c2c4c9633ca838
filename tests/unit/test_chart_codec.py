# ============================================================================
# FILE: tests/unit/test_chart_codec.py
# ============================================================================
"""
Unit tests for the chart wire codec and the typed-field codec
"""

import pytest

from src.lab_charting.charting.chart_codec import ChartCodec
from src.lab_charting.core.context import ChartDocument, ChartRow
from src.lab_charting.stores.field_codec import decode_fields, decode_value, encode_fields, encode_value


def test_encode_shape():
    chart = ChartDocument(
        dates=["2024-03-01"],
        rows=[ChartRow(label="Hb", data={"2024-03-01": "12"})],
        static={"g6pd": "Normal"},
    )
    doc = ChartCodec.encode(chart)

    assert doc["fields"]["dates"] == {"arrayValue": {"values": [{"stringValue": "2024-03-01"}]}}
    row = doc["fields"]["rows"]["arrayValue"]["values"][0]["mapValue"]["fields"]
    assert row["label"] == {"stringValue": "Hb"}
    assert row["category"] == {"stringValue": "Investigations"}
    assert row["data"]["mapValue"]["fields"]["2024-03-01"] == {"stringValue": "12"}
    assert doc["fields"]["static"]["mapValue"]["fields"]["g6pd"] == {"stringValue": "Normal"}


def test_decode_restores_chart():
    chart = ChartDocument(
        dates=["2024-03-01", "2024-03-01 (2)"],
        rows=[ChartRow(label="TLC", category="Investigations", data={"2024-03-01": "5.2"})],
        static={"bloodGroup": "O +ve"},
    )
    assert ChartCodec.decode(ChartCodec.encode(chart)) == chart


def test_decode_tolerates_missing_wrappers():
    chart = ChartCodec.decode({"fields": {"rows": {"arrayValue": {}}}})
    assert chart == ChartDocument()
    assert ChartCodec.decode(None) == ChartDocument()
    assert ChartCodec.decode({}) == ChartDocument()


def test_decode_drops_unlabeled_rows_and_coerces_cells():
    doc = {"fields": {
        "dates": {"arrayValue": {"values": [{"stringValue": "2024-03-01"}]}},
        "rows": {"arrayValue": {"values": [
            {"mapValue": {"fields": {"category": {"stringValue": "Investigations"}}}},
            {"mapValue": {"fields": {
                "label": {"stringValue": "Hb"},
                "data": {"mapValue": {"fields": {"2024-03-01": {"doubleValue": 12.5}}}},
            }}},
        ]}},
    }}
    chart = ChartCodec.decode(doc)
    assert [r.label for r in chart.rows] == ["Hb"]
    assert chart.rows[0].data == {"2024-03-01": "12.5"}
    assert chart.rows[0].category == "Investigations"


def test_field_codec_scalars():
    assert encode_value(12) == {"integerValue": "12"}
    assert encode_value(True) == {"booleanValue": True}
    assert encode_value(None) == {"nullValue": None}
    assert decode_value({"integerValue": "12"}) == 12
    assert decode_value({"unknownValue": 1}) is None


def test_field_codec_rejects_unknown_types():
    with pytest.raises(TypeError):
        encode_value(object())


def test_encode_decode_fields_nested():
    payload = {"data": {"Hb": "12"}, "matchScore": 80.5, "suggestedMatchId": None}
    assert decode_fields(encode_fields(payload)) == payload
