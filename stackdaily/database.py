from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import Engine, create_engine, inspect as sa_inspect, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from .config import settings

log = logging.getLogger("stackdaily.migrations")


class Base(DeclarativeBase):
    pass


def _make_engine(url: str) -> Optional[Engine]:
    if not url:
        return None
    return create_engine(
        url,
        echo=settings.log_sql,
        future=True,
        pool_pre_ping=True,
        connect_args={"check_same_thread": False} if "sqlite" in url else {},
    )


# None when no database is configured; persistence then becomes a no-op.
engine = _make_engine(settings.database_url)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def is_configured() -> bool:
    return engine is not None


def init_db() -> None:
    """Create tables for all registered models (safe to call repeatedly)."""
    if engine is None:
        return
    from . import models  # noqa: F401 — register tables
    Base.metadata.create_all(bind=engine)
    _run_migrations()


# Columns added after the initial schema: table -> [(column, DDL type)]
_ADDITIONS = {
    "submissions": [
        ("other_experience", "VARCHAR(100)"),
        ("other_monthly_rate", "VARCHAR(100)"),
    ],
}


def _run_migrations() -> None:
    """Add columns that create_all() won't add to existing tables."""
    inspector = sa_inspect(engine)
    with engine.connect() as conn:
        for table, columns in _ADDITIONS.items():
            if not inspector.has_table(table):
                continue
            existing = {c["name"] for c in inspector.get_columns(table)}
            for col_name, col_type in columns:
                if col_name in existing:
                    continue
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col_name} {col_type}"))
                conn.commit()
                log.info("Migration: added %s.%s (%s)", table, col_name, col_type)


@contextmanager
def db_session():
    """Context-manager style session with automatic commit/rollback."""
    if engine is None:
        raise RuntimeError("No database configured (set STACKDAILY_DATABASE_URL).")
    session: Session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
