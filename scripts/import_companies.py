#!/usr/bin/env python3
"""
Import company audit records from a JSON export.

Accepts either a list of company records or {"companies": [...]}, in the
camelCase shape of the hosted document store or of the browser's local
storage. Records are normalized on the way in (missing status, discharge
type, low-volume flag and opening date get their defaults; ISO and epoch
dates are both accepted).

Usage:
    python scripts/import_companies.py export.json [--dry-run]

Idempotent: records are upserted by id. An existing row is only replaced
when the imported record is at least as recent (lastUpdated).
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure repo root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.orm import Session

from app.audittrack.audit import record_event
from app.audittrack.modules.companies.models import CompanyRow
from app.audittrack.modules.companies.records import company_from_record
from app.audittrack.modules.companies.store import apply_company_to_row
from scripts._db_utils import script_database_url, script_session

logger = logging.getLogger(__name__)


def load_records(path: Path) -> list[dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("companies") or []
    if not isinstance(data, list):
        raise ValueError("Expected a list of company records or {\"companies\": [...]}")
    return [r for r in data if isinstance(r, dict)]


def import_records(s: Session, records: list[dict]) -> dict[str, int]:
    stats = {"created": 0, "updated": 0, "skipped": 0, "invalid": 0}
    for record in records:
        try:
            company = company_from_record(record)
        except ValueError as e:
            logger.warning("Skipping record: %s", e)
            stats["invalid"] += 1
            continue

        row = s.get(CompanyRow, company.id)
        if row is None:
            row = CompanyRow(id=company.id)
            s.add(row)
            stats["created"] += 1
        elif row.last_updated and row.last_updated > company.last_updated:
            stats["skipped"] += 1
            continue
        else:
            stats["updated"] += 1
        apply_company_to_row(row, company)
        record_event(
            s,
            action="company.import",
            entity_type="Company",
            entity_id=company.id,
            metadata={"name": company.name, "status": company.status.value},
        )
    return stats


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import company audit records from JSON.")
    parser.add_argument("path", type=Path)
    parser.add_argument("--database-url", default=None)
    parser.add_argument("--dry-run", action="store_true", help="Parse and normalize only; write nothing.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    records = load_records(args.path)
    print(f"Loaded {len(records)} record(s) from {args.path}")

    if args.dry_run:
        invalid = 0
        for record in records:
            try:
                company_from_record(record)
            except ValueError as e:
                invalid += 1
                print(f"  invalid: {e}")
        print(f"Dry run: {len(records) - invalid} valid, {invalid} invalid")
        return 0

    with script_session(script_database_url(args.database_url)) as s:
        stats = import_records(s, records)
    print(
        f"Import complete: created={stats['created']} updated={stats['updated']} "
        f"skipped={stats['skipped']} invalid={stats['invalid']}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
