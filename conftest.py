"""
pytest configuration – point the service at a throwaway SQLite database
and initialise tables before tests run.
"""
import os

os.environ.setdefault("STACKDAILY_DATABASE_URL", "sqlite:///./test_stackdaily.db")
os.environ.setdefault("STACKDAILY_LOG_FORMAT", "text")
os.environ.setdefault("STACKDAILY_SHEETS_WEBHOOK_URL", "")

import pytest  # noqa: E402

from stackdaily.database import Base, engine  # noqa: E402
from stackdaily import models  # noqa: E402,F401 – registers ORM mappings with Base.metadata
from stackdaily.rate_limit import submission_limiter  # noqa: E402


@pytest.fixture(autouse=True, scope="session")
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists("test_stackdaily.db"):
        os.remove("test_stackdaily.db")


@pytest.fixture(autouse=True)
def reset_submission_limiter():
    """Each test starts with empty rate-limit counters."""
    submission_limiter.reset()
    yield
    submission_limiter.reset()
