"""
Candidate router - API endpoints for candidate records.

Each endpoint validates its raw input first; the database session is only
used once the request is known to be valid.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from candidate_tracker.db.session import get_db
from candidate_tracker.schemas.candidate import (
    CandidateListResponse,
    CandidateMutationResponse,
    CandidateRead,
    CandidateResponse,
)
from candidate_tracker.services.candidate_service import CandidateService
from candidate_tracker.services.candidate_validation import validate_request

router = APIRouter(prefix="/candidates", tags=["candidates"])


@router.get("", response_model=CandidateListResponse)
async def list_candidates(db: AsyncSession = Depends(get_db)):
    """List all candidates, most recently created first."""
    service = CandidateService(db)
    candidates = await service.list_candidates()
    return CandidateListResponse(
        count=len(candidates),
        data=[CandidateRead.model_validate(c) for c in candidates],
    )


@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(candidate_id: str, db: AsyncSession = Depends(get_db)):
    """Get a candidate by ID."""
    request = validate_request("get", candidate_id=candidate_id)
    service = CandidateService(db)
    candidate = await service.get_candidate(request.candidate_id)
    return CandidateResponse(data=CandidateRead.model_validate(candidate))


@router.post("", response_model=CandidateMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db),
):
    """Create a new candidate. ``status`` defaults to Applied."""
    request = validate_request("create", body=payload)
    service = CandidateService(db)
    candidate = await service.create_candidate(request.data)
    return CandidateMutationResponse(
        message="Candidate created successfully",
        data=CandidateRead.model_validate(candidate),
    )


@router.put("/{candidate_id}", response_model=CandidateMutationResponse)
async def update_candidate(
    candidate_id: str,
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db),
):
    """
    Partially update a candidate.
    
    Only the fields present in the body are written; updated_at is always
    refreshed.
    """
    request = validate_request("update", candidate_id=candidate_id, body=payload)
    service = CandidateService(db)
    candidate = await service.update_candidate(request.candidate_id, request.data)
    return CandidateMutationResponse(
        message="Candidate updated successfully",
        data=CandidateRead.model_validate(candidate),
    )


@router.delete("/{candidate_id}", response_model=CandidateMutationResponse)
async def delete_candidate(candidate_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a candidate and return the deleted record."""
    request = validate_request("delete", candidate_id=candidate_id)
    service = CandidateService(db)
    candidate = await service.delete_candidate(request.candidate_id)
    return CandidateMutationResponse(
        message="Candidate deleted successfully",
        data=CandidateRead.model_validate(candidate),
    )
