"""
Models package.

Import all models here so they are registered with SQLAlchemy.
"""

from candidate_tracker.models.candidate import Candidate

__all__ = [
    "Candidate",
]
