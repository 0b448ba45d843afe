"""
Candidate repository - database operations for Candidate.
"""

import logging
from typing import Any, Dict, List, Mapping, NoReturn, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from candidate_tracker.errors import ConstraintViolation, DuplicateEmail, RecordNotFound
from candidate_tracker.models.candidate import (
    CANDIDATE_STATUSES,
    DEFAULT_STATUS,
    MAX_AGE,
    MAX_ID,
    MIN_AGE,
    Candidate,
)
from candidate_tracker.utils.time import utc_now

logger = logging.getLogger(__name__)

# Closed list of caller-writable columns, in schema order
CANDIDATE_FIELDS = (
    "name",
    "age",
    "email",
    "phone",
    "skills",
    "experience",
    "applied_position",
    "status",
)

UNIQUE_VIOLATION = "23505"

_CONSTRAINT_MESSAGES = {
    "ck_candidates_age_range": f"Age must be between {MIN_AGE} and {MAX_AGE}",
    "ck_candidates_status": "Status must be one of: " + ", ".join(CANDIDATE_STATUSES),
}


def build_update_values(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Build the SET clause of a partial update.

    Only keys present in ``changes`` that belong to the writable field list
    are emitted; a present ``None`` is kept (it clears the column). The
    ``updated_at`` stamp is always included.
    """
    values: Dict[str, Any] = {}
    for field in CANDIDATE_FIELDS:
        if field in changes:
            values[field] = changes[field]
    values["updated_at"] = utc_now()
    return values


def _sqlstate(exc: Exception) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the store rejected a write because of a UNIQUE constraint."""
    code = _sqlstate(exc)
    if code is not None:
        return code == UNIQUE_VIOLATION
    # SQLite: "UNIQUE constraint failed: candidates.email"
    return "unique" in str(exc.orig).lower()


def _constraint_message(exc: Exception) -> str:
    text = str(getattr(exc, "orig", exc))
    for name, message in _CONSTRAINT_MESSAGES.items():
        if name in text:
            return message
    return "The candidate violates a database constraint"


class CandidateRepository:
    """Repository for Candidate database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> List[Candidate]:
        """List all candidates, most recently created first."""
        result = await self.db.execute(
            select(Candidate).order_by(Candidate.created_at.desc(), Candidate.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_id(self, candidate_id: int) -> Optional[Candidate]:
        """Get a candidate by ID."""
        if candidate_id > MAX_ID:
            return None
        result = await self.db.execute(
            select(Candidate).where(Candidate.id == candidate_id)
        )
        return result.scalar_one_or_none()

    async def create(self, fields: Mapping[str, Any]) -> Candidate:
        """Create a new candidate."""
        values = {field: fields.get(field) for field in CANDIDATE_FIELDS}
        if values["status"] is None:
            values["status"] = DEFAULT_STATUS

        now = utc_now()
        candidate = Candidate(created_at=now, updated_at=now, **values)
        self.db.add(candidate)
        await self._flush_or_raise("A candidate with this email already exists")
        await self.db.refresh(candidate)
        return candidate

    async def update(self, candidate_id: int, changes: Mapping[str, Any]) -> Candidate:
        """Apply a partial update and return the updated candidate."""
        candidate = await self.get_by_id(candidate_id)
        if not candidate:
            raise RecordNotFound(candidate_id)

        stmt = (
            update(Candidate)
            .where(Candidate.id == candidate_id)
            .values(**build_update_values(changes))
            .execution_options(synchronize_session=False)
        )
        try:
            await self.db.execute(stmt)
        except (IntegrityError, DataError) as exc:
            await self._raise_store_error(exc, "Another candidate with this email already exists")

        await self.db.refresh(candidate)
        return candidate

    async def delete(self, candidate_id: int) -> Candidate:
        """Delete a candidate and return the row as it was before deletion."""
        candidate = await self.get_by_id(candidate_id)
        if not candidate:
            raise RecordNotFound(candidate_id)

        await self.db.delete(candidate)
        await self.db.flush()
        return candidate

    async def _flush_or_raise(self, duplicate_message: str) -> None:
        try:
            await self.db.flush()
        except (IntegrityError, DataError) as exc:
            await self._raise_store_error(exc, duplicate_message)

    async def _raise_store_error(self, exc: Exception, duplicate_message: str) -> NoReturn:
        # The failed statement poisons the transaction; reset before reporting
        await self.db.rollback()
        if isinstance(exc, IntegrityError) and is_unique_violation(exc):
            logger.info("Rejected duplicate candidate email")
            raise DuplicateEmail(duplicate_message) from exc
        logger.warning("Store constraint rejected candidate write: %s", getattr(exc, "orig", exc))
        raise ConstraintViolation(_constraint_message(exc)) from exc
