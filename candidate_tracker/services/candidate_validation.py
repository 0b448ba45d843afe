"""
Request validation for candidate operations.

``validate_request`` is a pure function: it never touches the database.
It evaluates every rule for the identifier and the body before reporting,
so the caller receives the full list of violations in one response.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from pydantic import BaseModel, ValidationError

from candidate_tracker.errors import ValidationFailed
from candidate_tracker.schemas.candidate import (
    CandidateCreate,
    CandidateIdentifier,
    CandidateUpdate,
    FieldViolation,
)

OPERATIONS = ("create", "update", "get", "delete")

# Operations that address an existing record by identifier
_IDENTIFIED = {"update", "get", "delete"}

_BODY_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "create": CandidateCreate,
    "update": CandidateUpdate,
}

_REQUIRED_MESSAGES = {
    "id": "Invalid candidate ID",
    "name": "Name is required",
    "age": "Age is required",
    "email": "Email is required",
}


@dataclass
class ValidatedRequest:
    """Normalized input for one operation."""

    operation: str
    candidate_id: Optional[int] = None
    data: Optional[Union[CandidateCreate, CandidateUpdate]] = None


def _to_violations(exc: ValidationError) -> List[FieldViolation]:
    violations = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        if error["type"] == "missing":
            message = _REQUIRED_MESSAGES.get(field, f"{field} is required")
        else:
            message = error["msg"]
        violations.append(FieldViolation(field=field, message=message))
    return violations


def check_identifier(candidate_id: Any) -> Tuple[Optional[int], List[FieldViolation]]:
    """Return the normalized identifier and any violations for it."""
    try:
        return CandidateIdentifier.model_validate({"id": candidate_id}).id, []
    except ValidationError as exc:
        return None, _to_violations(exc)


def check_body(operation: str, body: Any) -> Tuple[Optional[BaseModel], List[FieldViolation]]:
    """Return the normalized body model and any violations for it."""
    schema = _BODY_SCHEMAS[operation]
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return None, [FieldViolation(field="body", message="Request body must be a JSON object")]
    try:
        return schema.model_validate(body), []
    except ValidationError as exc:
        return None, _to_violations(exc)


def validate_request(operation: str, candidate_id: Any = None, body: Any = None) -> ValidatedRequest:
    """
    Validate the raw input of a candidate operation.

    Args:
        operation: one of ``create``, ``update``, ``get``, ``delete``
        candidate_id: raw path identifier (ignored for ``create``)
        body: decoded JSON body (ignored for ``get`` and ``delete``)

    Raises:
        ValidationFailed: with every violation found, identifier first.
    """
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown candidate operation: {operation!r}")

    result = ValidatedRequest(operation=operation)
    violations: List[FieldViolation] = []

    if operation in _IDENTIFIED:
        result.candidate_id, found = check_identifier(candidate_id)
        violations.extend(found)

    if operation in _BODY_SCHEMAS:
        result.data, found = check_body(operation, body)
        violations.extend(found)

    if violations:
        raise ValidationFailed(violations)
    return result
