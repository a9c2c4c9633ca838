#!/usr/bin/env python3
"""
Lab Report Processing Runner

Runs the lab charting orchestrator over a directory-backed document source:
scans unlabeled threads, extracts their PDF lab reports with Gemini, and
charts or queues the results.

Usage:
    python scripts/process_lab_reports.py --source ./mail
    python scripts/process_lab_reports.py --source ./mail --loop-minutes 10
    python scripts/process_lab_reports.py --health-check

Settings come from LAB_CHARTING_* environment variables or .env
(see lab_charting.config).
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from lab_charting.config import load_settings
from lab_charting.core.audit import RunAuditLogger
from lab_charting.core.context import RunState
from lab_charting.core.locks import SQLiteRunLock
from lab_charting.core.orchestrator import LabReportOrchestrator
from lab_charting.extraction import GeminiExtractionClient
from lab_charting.sources import DirectoryDocumentSource
from lab_charting.stores import SQLiteDocumentStore
from lab_charting.utils import setup_logging
from lab_charting.utils.exceptions import LabChartingError

logger = logging.getLogger("process_lab_reports")


async def health_check(settings) -> int:
    client = GeminiExtractionClient(settings.extraction)
    try:
        status = await client.health_check()
    finally:
        await client.close()

    print("--- Available models for this API key ---")
    for name in status["models"]:
        print(name)
    print(f"\n{status['model']}: {status['details']}")
    return 0 if status["healthy"] else 1


async def run(settings, source_dir: Path, loop_minutes: float) -> int:
    settings.store.create_directories()

    store = SQLiteDocumentStore(settings.store.DB_PATH)
    source = DirectoryDocumentSource(source_dir)
    client = GeminiExtractionClient(settings.extraction)
    lock = SQLiteRunLock(
        settings.store.DB_PATH,
        lease_seconds=settings.pipeline.LOCK_LEASE_SECONDS,
    )
    audit = (
        RunAuditLogger(settings.store.AUDIT_DB_PATH)
        if settings.logging.ENABLE_AUDIT_TRAIL else None
    )

    orchestrator = LabReportOrchestrator(
        settings=settings,
        source=source,
        extractor=client,
        store=store,
        lock=lock,
        audit=audit,
    )

    try:
        while True:
            summary = await orchestrator.run()
            print(json.dumps(summary.to_dict(), indent=2))
            logger.info(f"Extraction usage: {client.get_statistics()}")
            if loop_minutes <= 0:
                return 1 if summary.state == RunState.FAILED else 0
            await asyncio.sleep(loop_minutes * 60)
    finally:
        await client.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Chart lab reports from mail threads"
    )

    parser.add_argument(
        "--source",
        type=str,
        default="mail",
        help="Directory holding one sub-directory per mail thread"
    )

    parser.add_argument(
        "--loop-minutes",
        type=float,
        default=0,
        help="Re-run every N minutes instead of once"
    )

    parser.add_argument(
        "--health-check",
        action="store_true",
        help="List the models available to the API key and exit"
    )

    args = parser.parse_args()

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(
        level=settings.logging.LOG_LEVEL,
        log_file=settings.logging.LOG_FILE,
        format_json=settings.logging.LOG_JSON,
    )

    try:
        if args.health_check:
            return asyncio.run(health_check(settings))
        return asyncio.run(run(settings, Path(args.source), args.loop_minutes))
    except LabChartingError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
