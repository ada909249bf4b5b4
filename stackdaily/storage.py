"""
storage.py — Dual-write persistence for validated submissions
==============================================================
Each validated Submission is appended to the spreadsheet (via a Google
Apps Script web app) and inserted into the relational store. Both writes
are best-effort: failures and timeouts are logged, never raised, and the
request still succeeds.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import httpx

from . import database
from .catalogs import experience_label, monthly_rate_label
from .config import settings
from .encryption import encrypt_value, hash_value
from .models import SubmissionRow
from .schemas import Submission

logger = logging.getLogger("stackdaily.storage")

NOT_AVAILABLE = "N/A"

# Shared by all requests; each submission occupies at most two workers
_executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="storage")


@dataclass
class PersistResult:
    sheet_ok: bool
    db_ok: bool
    db_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Spreadsheet
# ---------------------------------------------------------------------------

SHEET_FIELDS = (
    "timestamp", "name", "telegram", "xProfile", "expertise",
    "experienceLevel", "monthlyRate", "biggestWin", "portfolio",
)


def submission_to_row(submission: Submission, timestamp: datetime) -> List[str]:
    """Flatten a submission into the 9-column spreadsheet row."""
    return [
        timestamp.isoformat(),
        submission.name,
        submission.telegram,
        submission.x_profile,
        ", ".join(submission.expertise),
        experience_label(submission.experience_level, submission.other_experience),
        (
            monthly_rate_label(submission.monthly_rate, submission.other_monthly_rate)
            if submission.monthly_rate else NOT_AVAILABLE
        ),
        submission.biggest_win,
        submission.portfolio or NOT_AVAILABLE,
    ]


class SheetsClient:
    """Appends rows through an Apps Script web app that accepts JSON."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    def append_row(self, row: List[str]) -> bool:
        if not self.webhook_url:
            logger.info("Sheets not configured; submission not appended (%d fields)", len(row))
            return False
        try:
            with httpx.Client(
                timeout=self.timeout, follow_redirects=True, transport=self._transport,
            ) as client:
                resp = client.post(self.webhook_url, json=dict(zip(SHEET_FIELDS, row)))
            if resp.status_code >= 400:
                logger.warning("Sheets append returned %d: %s", resp.status_code, resp.text[:200])
                return False
        except Exception as exc:
            logger.warning("Sheets append failed: %s", exc)
            return False
        return True


def get_sheets_client() -> SheetsClient:
    return SheetsClient(settings.sheets_webhook_url, settings.storage_timeout_seconds)


# ---------------------------------------------------------------------------
# Relational store
# ---------------------------------------------------------------------------

def save_submission(submission: Submission, created_at: Optional[datetime] = None) -> Optional[int]:
    """Insert one row and return its id; None when no database is configured."""
    if not database.is_configured():
        return None
    with database.db_session() as session:
        row = SubmissionRow(
            name=submission.name,
            telegram=encrypt_value(submission.telegram),
            x_profile=encrypt_value(submission.x_profile),
            expertise=", ".join(submission.expertise),
            experience_level=submission.experience_level,
            monthly_rate=submission.monthly_rate or None,
            biggest_win=submission.biggest_win,
            portfolio=submission.portfolio or None,
            other_experience=submission.other_experience or None,
            other_monthly_rate=submission.other_monthly_rate or None,
        )
        if created_at is not None:
            row.created_at = created_at
        session.add(row)
        session.flush()
        return row.id


# ---------------------------------------------------------------------------
# Dual write
# ---------------------------------------------------------------------------

def persist_submission(
    submission: Submission,
    sheets: Optional[SheetsClient] = None,
    timeout: Optional[float] = None,
) -> PersistResult:
    """Write to both collaborators concurrently, waiting a bounded time for each."""
    sheets = sheets or get_sheets_client()
    timeout = settings.storage_timeout_seconds if timeout is None else timeout
    now = datetime.now(timezone.utc)

    sheet_future = _executor.submit(sheets.append_row, submission_to_row(submission, now))
    db_future = _executor.submit(save_submission, submission, now)

    sheet_ok = False
    try:
        sheet_ok = bool(sheet_future.result(timeout=timeout))
    except FutureTimeout:
        logger.warning("Sheets append timed out after %.1fs", timeout)
    except Exception as exc:
        logger.warning("Sheets append raised: %s", exc)

    db_ok = False
    db_id = None
    try:
        db_id = db_future.result(timeout=timeout)
        db_ok = db_id is not None
    except FutureTimeout:
        logger.warning("Database insert timed out after %.1fs", timeout)
    except Exception as exc:
        logger.error("Database insert failed: %s", exc)

    logger.info(
        "Submission persisted (applicant=%s sheet=%s db=%s)",
        hash_value(submission.telegram)[:12], sheet_ok, db_ok,
    )
    return PersistResult(sheet_ok=sheet_ok, db_ok=db_ok, db_id=db_id)
