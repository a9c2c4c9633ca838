# ============================================================================
# TEST 1: Configuration and Setup
# ============================================================================

import pytest
from pydantic import ValidationError


def test_configuration(tmp_path):
    """Test that configuration loads correctly"""
    print("=" * 70)
    print("TEST 1: Configuration Loading")
    print("=" * 70)

    from src.lab_charting.config import AppSettings, StoreSettings

    settings = AppSettings()
    print(f"✓ Configuration loaded successfully")
    print(f"  - Query: {settings.pipeline.EMAIL_QUERY}")
    print(f"  - Auto-save threshold: {settings.thresholds.AUTO_SAVE_THRESHOLD}")
    print(f"  - Model: {settings.extraction.GEMINI_MODEL}")

    assert settings.pipeline.EMAIL_BATCH_SIZE == 15
    assert settings.pipeline.EXTRACTION_BATCH_SIZE == 10
    assert settings.pipeline.MAX_EXECUTION_SECONDS == 240
    assert settings.pipeline.BATCH_PAUSE_SECONDS == 30
    assert settings.pipeline.COMPLETION_LABEL == "Charted"

    # Test directory creation
    store = StoreSettings(DB_PATH=tmp_path / "db" / "store.db", AUDIT_DB_PATH=tmp_path / "audit" / "a.db")
    store.create_directories()
    assert (tmp_path / "db").is_dir()
    assert (tmp_path / "audit").is_dir()
    print(f"✓ Created necessary directories")

    # Test validator
    assert settings.thresholds.AUTO_SAVE_THRESHOLD > settings.thresholds.CONTENT_MATCH_FLOOR, \
        "Threshold validation failed"
    print(f"✓ Configuration validators working")

    print("\n✅ Configuration test PASSED\n")


def test_threshold_ordering_enforced():
    from src.lab_charting.config import ThresholdSettings

    with pytest.raises(ValidationError):
        ThresholdSettings(AUTO_SAVE_THRESHOLD=50, CONTENT_MATCH_FLOOR=60)


def test_settings_are_frozen():
    from src.lab_charting.config import PipelineSettings

    pipeline = PipelineSettings()
    with pytest.raises(ValidationError):
        pipeline.EMAIL_BATCH_SIZE = 99


def test_environment_override(monkeypatch):
    from src.lab_charting.config import PipelineSettings, ExtractionSettings

    monkeypatch.setenv("LAB_CHARTING_EXTRACTION_BATCH_SIZE", "4")
    monkeypatch.setenv("LAB_CHARTING_GEMINI_API_KEY", "secret")

    assert PipelineSettings().EXTRACTION_BATCH_SIZE == 4
    extraction = ExtractionSettings()
    assert extraction.GEMINI_API_KEY.get_secret_value() == "secret"
    assert "secret" not in repr(extraction)


def test_chart_path():
    from src.lab_charting.config import StoreSettings

    assert StoreSettings().chart_path("p1") == "public/data/medical_charts/p1"
