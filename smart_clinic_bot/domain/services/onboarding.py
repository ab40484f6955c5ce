"""Onboarding survey state machine.

Linear survey: specialty -> city -> email -> complete. Every step accepts a
skip token, which finishes the survey without recording that answer. The
machine is pure: it takes a session and an input and returns a transition;
persisting the session and the profile is the caller's job.
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional

from ..value_objects import Provided, SKIPPED, SurveyAnswers

SKIP_COMMAND = "/skip"

_NON_LETTERS = re.compile(r"[^a-zA-Zа-яА-ЯёЁ]")


class OnboardingStep(str, Enum):
    """Ordered survey steps."""
    SPECIALTY = "specialty"
    CITY = "city"
    EMAIL = "email"
    COMPLETE = "complete"


class TransitionOutcome(Enum):
    ADVANCED = "advanced"
    REJECTED = "rejected"
    COMPLETED = "completed"


@dataclass(frozen=True)
class OnboardingSession:
    """Transient survey progress of one user."""

    telegram_id: int
    step: OnboardingStep = OnboardingStep.SPECIALTY
    answers: SurveyAnswers = field(default_factory=SurveyAnswers)

    @property
    def is_complete(self) -> bool:
        return self.step is OnboardingStep.COMPLETE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "telegram_id": self.telegram_id,
            "step": self.step.value,
            "answers": self.answers.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OnboardingSession":
        return cls(
            telegram_id=int(data["telegram_id"]),
            step=OnboardingStep(data.get("step", OnboardingStep.SPECIALTY.value)),
            answers=SurveyAnswers.from_dict(data.get("answers") or {}),
        )


@dataclass(frozen=True)
class Transition:
    """Result of feeding one input to the machine."""

    session: OnboardingSession
    outcome: TransitionOutcome
    error: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.outcome is TransitionOutcome.COMPLETED


def sanitize_specialty(text: str) -> str:
    """Keep Latin and Cyrillic letters only."""
    return _NON_LETTERS.sub("", text)


def is_valid_email(text: str) -> bool:
    return "@" in text


class OnboardingStateMachine:
    """Drives the first-contact survey one answer at a time."""

    def __init__(self, skip_tokens: Iterable[str] = ()):
        self.skip_tokens: FrozenSet[str] = frozenset(
            token.strip() for token in (*skip_tokens, SKIP_COMMAND) if token
        )

    def is_skip(self, text: str) -> bool:
        return text.strip() in self.skip_tokens

    def start(self, telegram_id: int) -> OnboardingSession:
        return OnboardingSession(telegram_id=telegram_id)

    def advance(self, session: OnboardingSession, text: str) -> Transition:
        if session.is_complete:
            return Transition(session, TransitionOutcome.COMPLETED)

        text = (text or "").strip()

        if self.is_skip(text):
            return self._complete(session)

        if session.step is OnboardingStep.SPECIALTY:
            specialty = sanitize_specialty(text)
            answers = replace(
                session.answers,
                specialty=Provided(specialty) if specialty else SKIPPED,
            )
            return self._advance_to(session, OnboardingStep.CITY, answers)

        if session.step is OnboardingStep.CITY:
            answers = replace(session.answers, city=Provided(text) if text else SKIPPED)
            return self._advance_to(session, OnboardingStep.EMAIL, answers)

        # OnboardingStep.EMAIL
        if not is_valid_email(text):
            return Transition(session, TransitionOutcome.REJECTED, error="invalid_email")

        answers = replace(session.answers, email=Provided(text))
        return self._complete(replace(session, answers=answers))

    def _advance_to(self, session: OnboardingSession, step: OnboardingStep, answers: SurveyAnswers) -> Transition:
        return Transition(replace(session, step=step, answers=answers), TransitionOutcome.ADVANCED)

    def _complete(self, session: OnboardingSession) -> Transition:
        return Transition(replace(session, step=OnboardingStep.COMPLETE), TransitionOutcome.COMPLETED)
