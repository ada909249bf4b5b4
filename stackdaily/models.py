from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Integer, String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class SubmissionRow(Base):
    """One validated onboarding submission."""

    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    # Contact handles are Fernet tokens when an encryption key is configured
    telegram: Mapped[str] = mapped_column(Text)
    x_profile: Mapped[str] = mapped_column(Text)
    expertise: Mapped[str] = mapped_column(Text)          # comma-separated
    experience_level: Mapped[str] = mapped_column(String(32), index=True)
    monthly_rate: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    biggest_win: Mapped[str] = mapped_column(Text)
    portfolio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Free text for an "other" experience or rate tag
    other_experience: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    other_monthly_rate: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), index=True
    )
