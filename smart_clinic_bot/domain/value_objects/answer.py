"""Survey answer value objects.

Every survey question resolves to either ``Provided(value)`` or ``SKIPPED``.
``SurveyAnswers.as_profile_fields`` folds them into the profile update in one
place.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Provided:
    """A question answered with a value."""

    value: str


class Skipped:
    """A question skipped by the user (or never asked)."""

    _instance: Optional["Skipped"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SKIPPED"

    def __bool__(self) -> bool:
        return False


SKIPPED = Skipped()

Answer = Union[Provided, Skipped]


def answer_from_raw(value: Optional[str]) -> Answer:
    """Build an answer from a stored raw value (None means skipped)."""
    return Provided(value) if value else SKIPPED


@dataclass(frozen=True)
class SurveyAnswers:
    """Answers accumulated by the onboarding survey."""

    specialty: Answer = field(default=SKIPPED)
    city: Answer = field(default=SKIPPED)
    email: Answer = field(default=SKIPPED)

    def as_profile_fields(self) -> Dict[str, str]:
        """Provided answers only, keyed by profile field name."""
        return {
            item.name: getattr(self, item.name).value
            for item in fields(self)
            if isinstance(getattr(self, item.name), Provided)
        }

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Serialize for FSM storage."""
        return {
            item.name: getattr(self, item.name).value
            if isinstance(getattr(self, item.name), Provided) else None
            for item in fields(self)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SurveyAnswers":
        return cls(**{
            item.name: answer_from_raw(data.get(item.name))
            for item in fields(cls)
        })
