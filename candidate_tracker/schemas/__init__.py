"""
Schemas package.

Import all schemas here for easy access.
"""

from candidate_tracker.schemas.candidate import (
    CandidateCreate,
    CandidateIdentifier,
    CandidateListResponse,
    CandidateMutationResponse,
    CandidateRead,
    CandidateResponse,
    CandidateUpdate,
    FieldViolation,
    HealthResponse,
)

__all__ = [
    "CandidateCreate",
    "CandidateIdentifier",
    "CandidateListResponse",
    "CandidateMutationResponse",
    "CandidateRead",
    "CandidateResponse",
    "CandidateUpdate",
    "FieldViolation",
    "HealthResponse",
]
