"""
Candidate business logic service.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from candidate_tracker.errors import OperationFailed, RecordNotFound
from candidate_tracker.models.candidate import Candidate
from candidate_tracker.repositories.candidate_repository import CandidateRepository
from candidate_tracker.schemas.candidate import CandidateCreate, CandidateUpdate

logger = logging.getLogger(__name__)


class CandidateService:
    """
    Service for candidate operations.

    Domain errors from the repository (not found, duplicate email,
    constraint violation) pass through unchanged. Any other store error
    becomes ``OperationFailed`` for the action being performed.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = CandidateRepository(db)

    async def list_candidates(self) -> List[Candidate]:
        """List all candidates, newest first."""
        try:
            return await self.repository.list_all()
        except SQLAlchemyError as exc:
            raise self._failed("fetch", exc, subject="candidates") from exc

    async def get_candidate(self, candidate_id: int) -> Candidate:
        """Get a candidate by ID or raise RecordNotFound."""
        try:
            candidate = await self.repository.get_by_id(candidate_id)
        except SQLAlchemyError as exc:
            raise self._failed("fetch", exc) from exc
        if not candidate:
            raise RecordNotFound(candidate_id)
        return candidate

    async def create_candidate(self, data: CandidateCreate) -> Candidate:
        """Create a candidate and commit it."""
        try:
            candidate = await self.repository.create(data.model_dump(exclude_unset=True))
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failed("create", exc) from exc
        logger.info("Created candidate %s", candidate.id)
        return candidate

    async def update_candidate(self, candidate_id: int, data: CandidateUpdate) -> Candidate:
        """Apply only the supplied fields of ``data`` and commit."""
        changes = data.model_dump(exclude_unset=True)
        try:
            candidate = await self.repository.update(candidate_id, changes)
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failed("update", exc) from exc
        logger.info("Updated candidate %s (fields: %s)", candidate_id, ", ".join(sorted(changes)) or "none")
        return candidate

    async def delete_candidate(self, candidate_id: int) -> Candidate:
        """Delete a candidate and return its last state."""
        try:
            candidate = await self.repository.delete(candidate_id)
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failed("delete", exc) from exc
        logger.info("Deleted candidate %s", candidate_id)
        return candidate

    def _failed(self, action: str, exc: SQLAlchemyError, subject: str = "candidate") -> OperationFailed:
        logger.error("Failed to %s %s: %s", action, subject, exc, exc_info=exc)
        return OperationFailed(action, str(getattr(exc, "orig", None) or exc), subject=subject)
