"""
User data model.

Represents a MovieLens user as loaded from u.user.
"""

from dataclasses import dataclass
from enum import Enum


class Gender(Enum):
    """Gender as recorded in u.user. Anything other than M/F is UNKNOWN."""
    MALE = "M"
    FEMALE = "F"
    UNKNOWN = "U"

    @classmethod
    def from_code(cls, code: str) -> "Gender":
        """Parse a raw gender code case-insensitively."""
        normalized = (code or "").strip().upper()
        if normalized == "M":
            return cls.MALE
        if normalized == "F":
            return cls.FEMALE
        return cls.UNKNOWN


@dataclass(frozen=True)
class User:
    """
    A rater. Immutable once loaded; identity is the id.
    """
    id: int
    age: int
    gender: Gender = Gender.UNKNOWN
