"""
export.py — Operator export of stored submissions
==================================================
Reads the submissions table, decrypts contact handles and writes CSV in
the same column layout as the spreadsheet.

    python -m stackdaily.export --output submissions.csv
"""
from __future__ import annotations

import csv
import sys
from datetime import datetime
from typing import Dict, List, Optional, TextIO

from sqlalchemy import select

from . import database
from .catalogs import experience_label, monthly_rate_label
from .config import settings
from .encryption import decrypt_value, reset_cipher
from .models import SubmissionRow
from .storage import NOT_AVAILABLE, SHEET_FIELDS


def _row_to_record(row: SubmissionRow) -> Dict[str, str]:
    created: datetime = row.created_at
    return {
        "timestamp": created.isoformat() if created else "",
        "name": row.name,
        "telegram": decrypt_value(row.telegram),
        "xProfile": decrypt_value(row.x_profile),
        "expertise": row.expertise,
        "experienceLevel": experience_label(row.experience_level, row.other_experience or ""),
        "monthlyRate": (
            monthly_rate_label(row.monthly_rate, row.other_monthly_rate or "")
            if row.monthly_rate else NOT_AVAILABLE
        ),
        "biggestWin": row.biggest_win,
        "portfolio": row.portfolio or NOT_AVAILABLE,
    }


def load_submissions(since: Optional[datetime] = None) -> List[Dict[str, str]]:
    """Return stored submissions, oldest first, with handles decrypted."""
    if not database.is_configured():
        return []
    with database.db_session() as session:
        stmt = select(SubmissionRow).order_by(SubmissionRow.created_at.asc(), SubmissionRow.id.asc())
        if since is not None:
            # SQLite stores naive UTC datetimes; strip tzinfo for comparison
            stmt = stmt.where(SubmissionRow.created_at >= since.replace(tzinfo=None))
        rows = session.execute(stmt).scalars().all()
        return [_row_to_record(row) for row in rows]


def write_csv(records: List[Dict[str, str]], stream: TextIO) -> int:
    writer = csv.DictWriter(stream, fieldnames=list(SHEET_FIELDS))
    writer.writeheader()
    writer.writerows(records)
    return len(records)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Export Stack Daily submissions as CSV")
    parser.add_argument("--output", "-o", default="-", help="CSV file path (default: stdout)")
    parser.add_argument(
        "--since",
        type=datetime.fromisoformat,
        default=None,
        help="Only rows created at or after this ISO-8601 timestamp",
    )
    parser.add_argument(
        "--encryption-key",
        default=None,
        help="Fernet key to decrypt with, overriding STACKDAILY_ENCRYPTION_KEY",
    )
    args = parser.parse_args(argv)

    if args.encryption_key is not None:
        settings.encryption_key = args.encryption_key
        reset_cipher()

    if not database.is_configured():
        print("No database configured (set STACKDAILY_DATABASE_URL).", file=sys.stderr)
        return 1

    records = load_submissions(since=args.since)
    if args.output == "-":
        count = write_csv(records, sys.stdout)
    else:
        with open(args.output, "w", newline="", encoding="utf-8") as fh:
            count = write_csv(records, fh)
    print(f"Exported {count} submissions.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
