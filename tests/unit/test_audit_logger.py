# ============================================================================
# TEST 7: Run Audit Logger
# ============================================================================

def test_audit_logger(tmp_path):
    """Test run audit trail logging"""
    print("=" * 70)
    print("TEST 7: Run Audit Logger")
    print("=" * 70)

    from src.lab_charting.core.audit import RunAuditLogger

    test_db = tmp_path / "audit" / "test_audit.db"
    audit = RunAuditLogger(db_path=test_db)
    print(f"✓ Run Audit Logger initialized")
    print(f"  - Database: {test_db}")
    assert test_db.exists()

    audit.log_run_start("run-1")
    audit.log_event(
        "run-1", "AUTO_SAVE",
        filename="cbc.pdf", patient_id="p1", score=100.0,
        details={"saved": ["General"]}
    )
    audit.log_event("run-1", "INBOX", filename="cbc.pdf", reason="New Parameters")
    audit.log_event("run-2", "INBOX", filename="other.pdf", reason="Low Score")
    audit.log_run_complete("run-1", "done", {"auto_saved": 1, "sent_to_inbox": 1})
    print(f"\n✓ Logged run with 2 events")

    trail = audit.get_trail("run-1")
    print(f"\n✓ Retrieved audit trail: {len(trail)} entries")
    assert [e["event_type"] for e in trail] == ["AUTO_SAVE", "INBOX"]
    assert trail[0]["patient_id"] == "p1"
    assert trail[0]["details"] == {"saved": ["General"]}
    assert trail[1]["details"] == {}

    run = audit.get_run("run-1")
    assert run["state"] == "done"
    assert run["finished_at"] is not None
    assert run["summary"] == {"auto_saved": 1, "sent_to_inbox": 1}

    print("\n✅ Run Audit Logger test PASSED\n")


# ============================================================================
# TEST 8: Unknown run
# ============================================================================

def test_audit_unknown_run(tmp_path):
    """Test lookups for a run that never started"""
    from src.lab_charting.core.audit import RunAuditLogger

    audit = RunAuditLogger(db_path=tmp_path / "audit.db")
    assert audit.get_run("missing") is None
    assert audit.get_trail("missing") == []

    audit.log_run_start("started-only")
    run = audit.get_run("started-only")
    assert run["state"] is None
    assert run["summary"] is None
