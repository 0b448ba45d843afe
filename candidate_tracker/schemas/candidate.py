"""
Candidate Pydantic schemas.

Input schemas run every field rule in ``mode="before"`` validators so that
one ``model_validate`` call reports every violating field at once. Update
inputs rely on ``model_fields_set``: a key absent from the request body is
never touched.
"""

import re
from datetime import datetime
from typing import Annotated, Any, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic_core import PydanticCustomError

from candidate_tracker.models.candidate import (
    APPLIED_POSITION_MAX_LENGTH,
    CANDIDATE_STATUSES,
    EMAIL_MAX_LENGTH,
    EXPERIENCE_MAX_LENGTH,
    MAX_AGE,
    MIN_AGE,
    NAME_MAX_LENGTH,
)

NAME_MIN_LENGTH = 2

PHONE_PATTERN = re.compile(
    r"^[+]?[(]?[0-9]{1,4}[)]?[-\s.]?[(]?[0-9]{1,4}[)]?[-\s.]?[0-9]{1,9}$"
)

STATUS_MESSAGE = "Status must be one of: " + ", ".join(CANDIDATE_STATUSES)


def _fail(field: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(f"candidate_{field}", message)


def _check_name(value: Any) -> str:
    if value is None:
        raise _fail("name", "Name is required")
    if not isinstance(value, str):
        raise _fail("name", "Name must be text")
    value = value.strip()
    if not value:
        raise _fail("name", "Name is required")
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        raise _fail(
            "name",
            f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters",
        )
    return value


def _check_age(value: Any) -> int:
    if value is None:
        raise _fail("age", "Age is required")
    # bool is an int subclass; true/false are not ages
    if isinstance(value, bool):
        raise _fail("age", "Age must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise _fail("age", "Age must be an integer")
        value = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not re.fullmatch(r"[+-]?[0-9]+", text):
            raise _fail("age", "Age must be an integer")
        value = int(text)
    elif not isinstance(value, int):
        raise _fail("age", "Age must be an integer")
    if not MIN_AGE <= value <= MAX_AGE:
        raise _fail("age", f"Age must be between {MIN_AGE} and {MAX_AGE}")
    return value


def normalize_email(value: str) -> str:
    """Trim, validate syntax and lowercase an email address.

    Raises ``EmailNotValidError`` for malformed input.
    """
    result = validate_email(value.strip(), check_deliverability=False)
    return result.normalized.lower()


def _check_email(value: Any) -> str:
    if value is None:
        raise _fail("email", "Email is required")
    if not isinstance(value, str):
        raise _fail("email", "Must be a valid email address")
    if not value.strip():
        raise _fail("email", "Email is required")
    try:
        email = normalize_email(value)
    except EmailNotValidError:
        raise _fail("email", "Must be a valid email address")
    if len(email) > EMAIL_MAX_LENGTH:
        raise _fail("email", "Must be a valid email address")
    return email


def _optional_text(value: Any, field: str, label: str, max_length: Optional[int] = None) -> Optional[str]:
    """Trim optional free text; blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise _fail(field, f"{label} must be text")
    value = value.strip()
    if not value:
        return None
    if max_length is not None and len(value) > max_length:
        raise _fail(field, f"{label} must be at most {max_length} characters")
    return value


def _check_phone(value: Any) -> Optional[str]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        raise _fail("phone", "Must be a valid phone number")
    value = _optional_text(value, "phone", "Phone")
    if value is not None and not PHONE_PATTERN.match(value):
        raise _fail("phone", "Must be a valid phone number")
    return value


def _check_skills(value: Any) -> Optional[str]:
    return _optional_text(value, "skills", "Skills")


def _check_experience(value: Any) -> Optional[str]:
    return _optional_text(value, "experience", "Experience", EXPERIENCE_MAX_LENGTH)


def _check_applied_position(value: Any) -> Optional[str]:
    return _optional_text(value, "applied_position", "Applied position", APPLIED_POSITION_MAX_LENGTH)


def _check_status(value: Any) -> str:
    if not isinstance(value, str) or value.strip() not in CANDIDATE_STATUSES:
        raise _fail("status", STATUS_MESSAGE)
    return value.strip()


def _check_optional_status(value: Any) -> Optional[str]:
    # On create, null means "use the default"
    if value is None:
        return None
    return _check_status(value)


def _check_identifier(value: Any) -> int:
    if isinstance(value, bool):
        raise _fail("id", "Invalid candidate ID")
    if isinstance(value, str):
        text = value.strip()
        if not text.isascii() or not text.isdigit():
            raise _fail("id", "Invalid candidate ID")
        value = int(text)
    if not isinstance(value, int) or value < 1:
        raise _fail("id", "Invalid candidate ID")
    return value


CandidateName = Annotated[str, BeforeValidator(_check_name)]
CandidateAge = Annotated[int, BeforeValidator(_check_age)]
CandidateEmail = Annotated[str, BeforeValidator(_check_email)]
Phone = Annotated[Optional[str], BeforeValidator(_check_phone)]
Skills = Annotated[Optional[str], BeforeValidator(_check_skills)]
Experience = Annotated[Optional[str], BeforeValidator(_check_experience)]
AppliedPosition = Annotated[Optional[str], BeforeValidator(_check_applied_position)]
CandidateId = Annotated[int, BeforeValidator(_check_identifier)]


class CandidateIdentifier(BaseModel):
    """Path identifier for get/update/delete."""

    id: CandidateId


class CandidateCreate(BaseModel):
    """Schema for creating a candidate."""

    name: CandidateName
    age: CandidateAge
    email: CandidateEmail
    phone: Phone = None
    skills: Skills = None
    experience: Experience = None
    applied_position: AppliedPosition = None
    status: Annotated[Optional[str], BeforeValidator(_check_optional_status)] = None


class CandidateUpdate(BaseModel):
    """
    Schema for a partial update.

    Every field is optional, but a supplied name/age/email/status must be
    valid (they can't be cleared). Use ``model_dump(exclude_unset=True)``
    to get only the supplied fields.
    """

    name: Annotated[Optional[str], BeforeValidator(_check_name)] = None
    age: Annotated[Optional[int], BeforeValidator(_check_age)] = None
    email: Annotated[Optional[str], BeforeValidator(_check_email)] = None
    phone: Phone = None
    skills: Skills = None
    experience: Experience = None
    applied_position: AppliedPosition = None
    status: Annotated[Optional[str], BeforeValidator(_check_status)] = None


class FieldViolation(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str


class CandidateRead(BaseModel):
    """Schema for reading candidate data (API response)."""

    id: int
    name: str
    age: int
    email: str
    phone: Optional[str]
    skills: Optional[str]
    experience: Optional[str]
    applied_position: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime

    # This tells Pydantic to work with SQLAlchemy models
    model_config = ConfigDict(from_attributes=True)


class CandidateResponse(BaseModel):
    """Envelope for a single candidate read."""

    success: bool = True
    data: CandidateRead


class CandidateMutationResponse(BaseModel):
    """Envelope for create/update/delete results."""

    success: bool = True
    message: str
    data: CandidateRead


class CandidateListResponse(BaseModel):
    """Envelope for the candidate list."""

    success: bool = True
    count: int
    data: List[CandidateRead]


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
