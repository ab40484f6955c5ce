"""Domain value objects module."""

from .identity import TelegramIdentity
from .answer import Answer, Provided, Skipped, SKIPPED, SurveyAnswers, answer_from_raw

__all__ = [
    "TelegramIdentity",
    "Answer",
    "Provided",
    "Skipped",
    "SKIPPED",
    "SurveyAnswers",
    "answer_from_raw",
]
