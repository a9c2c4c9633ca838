# ============================================================================
# FILE: tests/unit/test_gemini_client.py
# ============================================================================
"""
Unit tests for the Gemini extraction client (no network)
"""

import base64

import pytest

from src.lab_charting.config import ExtractionSettings
from src.lab_charting.extraction import ExtractionDocument, GeminiExtractionClient, build_batch_prompt
from src.lab_charting.utils.exceptions import ExtractionError


@pytest.fixture
def client():
    return GeminiExtractionClient(ExtractionSettings(GEMINI_API_KEY="test-key"))


def test_prompt_counts_and_override():
    prompt = build_batch_prompt(3)
    assert "attached 3 PDF lab reports" in prompt
    assert "exactly 3 objects" in prompt
    assert "SPECIAL USER INSTRUCTIONS" not in prompt

    prompt = build_batch_prompt(1, "Report CRP in mg/dL")
    assert "7. SPECIAL USER INSTRUCTIONS (OVERRIDE RULES):\nReport CRP in mg/dL" in prompt


def test_payload_parts(client):
    payload = client.build_payload(
        [ExtractionDocument("a.pdf", b"AAA"), ExtractionDocument("b.pdf", b"BBB")]
    )
    parts = payload["contents"][0]["parts"]

    assert payload["generationConfig"] == {"responseMimeType": "application/json"}
    assert len(parts) == 5
    assert parts[1] == {"text": "\n--- FILE: a.pdf ---\n"}
    assert parts[2]["inlineData"] == {
        "mimeType": "application/pdf",
        "data": base64.b64encode(b"AAA").decode("ascii"),
    }


def test_response_text_and_array(client):
    body = {"candidates": [{"content": {"parts": [{"text": '[{"filename": "a.pdf"}]'}]}}]}
    assert client.parse_report_array(client.response_text(body)) == [{"filename": "a.pdf"}]


def test_api_error_raises(client):
    with pytest.raises(ExtractionError, match="quota"):
        client.response_text({"error": {"message": "quota exceeded"}})


def test_missing_candidates_raises(client):
    with pytest.raises(ExtractionError):
        client.response_text({"candidates": []})


def test_repairs_malformed_json(client):
    reports = client.parse_report_array('[{"filename": "a.pdf", "values": {"Hb": "12",}},]')
    assert reports == [{"filename": "a.pdf", "values": {"Hb": "12"}}]


def test_single_object_wrapped(client):
    assert client.parse_report_array('{"filename": "a.pdf"}') == [{"filename": "a.pdf"}]


def test_non_array_rejected(client):
    with pytest.raises(ExtractionError):
        client.parse_report_array('"just text"')
    with pytest.raises(ExtractionError):
        client.parse_report_array("   ")


def test_non_object_entries_dropped(client):
    assert client.parse_report_array('[{"filename": "a.pdf"}, 3, "x"]') == [{"filename": "a.pdf"}]


@pytest.mark.asyncio
async def test_empty_batch_makes_no_call(client):
    assert await client.extract_batch([]) == []


@pytest.mark.asyncio
async def test_missing_api_key():
    client = GeminiExtractionClient(ExtractionSettings(GEMINI_API_KEY=""))
    try:
        with pytest.raises(ExtractionError, match="GEMINI_API_KEY"):
            await client.extract_batch([ExtractionDocument("a.pdf", b"x")])
        status = await client.health_check()
        assert status["healthy"] is False
    finally:
        await client.close()
