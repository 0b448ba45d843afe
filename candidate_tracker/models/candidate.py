"""
Candidate model.

Represents a job candidate moving through the hiring pipeline.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from candidate_tracker.db.base import Base

# Pipeline statuses, canonical casing
CANDIDATE_STATUSES = ("Applied", "Interviewing", "Hired", "Rejected", "On Hold")
DEFAULT_STATUS = "Applied"

MIN_AGE = 1
MAX_AGE = 150

# Largest value the integer id column can hold
MAX_ID = 2_147_483_647

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 30
EXPERIENCE_MAX_LENGTH = 50
APPLIED_POSITION_MAX_LENGTH = 100


def _status_check() -> str:
    allowed = ", ".join(f"'{status}'" for status in CANDIDATE_STATUSES)
    return f"status IN ({allowed})"


class Candidate(Base):
    """
    Candidate table - one row per applicant.
    
    The email UNIQUE constraint is the final authority for uniqueness;
    age and status are re-checked by CHECK constraints.
    """
    
    __tablename__ = "candidates"
    __table_args__ = (
        UniqueConstraint("email", name="uq_candidates_email"),
        CheckConstraint(f"age >= {MIN_AGE} AND age <= {MAX_AGE}", name="ck_candidates_age_range"),
        CheckConstraint(_status_check(), name="ck_candidates_status"),
        Index("idx_candidates_status", "status"),
        # Never reuse ids of deleted rows on SQLite
        {"sqlite_autoincrement": True},
    )
    
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    
    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
    )
    
    age: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    
    # Stored normalized (lowercase)
    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH),
        nullable=False,
    )
    
    phone: Mapped[Optional[str]] = mapped_column(
        String(PHONE_MAX_LENGTH),
        nullable=True,
    )
    
    skills: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    experience: Mapped[Optional[str]] = mapped_column(
        String(EXPERIENCE_MAX_LENGTH),
        nullable=True,
    )
    
    applied_position: Mapped[Optional[str]] = mapped_column(
        String(APPLIED_POSITION_MAX_LENGTH),
        nullable=True,
    )
    
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_STATUS,
        server_default=DEFAULT_STATUS,
    )
    
    # Stamped by the repository so both values come from the same clock reading
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<Candidate id={self.id} email={self.email!r} status={self.status!r}>"
