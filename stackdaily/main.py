from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pythonjsonlogger import jsonlogger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import settings
from .database import init_db
from .rate_limit import RateLimitSweeper, limiter, submission_limiter
from .api import routes_avatar, routes_cards, routes_submit

# ---------------------------------------------------------------------------
# Structured logging
# ---------------------------------------------------------------------------

def _configure_logging() -> None:
    """Configure structured JSON logging when log_format=json (default)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == "json":
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    handler.setFormatter(formatter)
    root.addHandler(handler)

_configure_logging()

log = logging.getLogger("stackdaily.main")

# Initialise database tables on startup (no-op without a database)
try:
    init_db()
except Exception as exc:
    log.warning("Database initialisation failed; submissions will not be stored: %s", exc)

_sweeper = RateLimitSweeper(submission_limiter, settings.rate_limit_sweep_seconds)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    _sweeper.start()
    try:
        yield
    finally:
        _sweeper.stop()


app = FastAPI(
    title="Stack Daily Intake",
    version="1.0.0",
    description=(
        "Lead-capture backend for the Stack Daily onboarding form. "
        "Validates and stores applications, computes the membership card "
        "title and proxies profile avatars."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors (400), reported in the form's response shape."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": "Invalid input. Please check all required fields."},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(routes_submit.router)
app.include_router(routes_avatar.router)
app.include_router(routes_cards.router)


@app.get("/", tags=["meta"])
def root() -> dict:
    return {"status": "ok", "service": "stackdaily-intake", "version": "1.0.0"}


@app.get("/health", tags=["meta"])
def health() -> dict:
    return {"status": "healthy"}


@app.get("/healthz", tags=["meta"])
def healthz() -> dict:
    """Lightweight health check for load balancer checks."""
    return {"status": "ok"}
