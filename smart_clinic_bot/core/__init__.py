"""Core: configuration, logging and exceptions."""

from .config import Settings, get_settings
from .logging import setup_logging
from .exceptions import (
    SmartClinicException,
    ValidationError,
    UserNotFoundError,
    ContentNotFoundError,
    QuestionNotFoundError,
    PlanNotFoundError,
    AccessDeniedError,
    StorageError,
)

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "SmartClinicException",
    "ValidationError",
    "UserNotFoundError",
    "ContentNotFoundError",
    "QuestionNotFoundError",
    "PlanNotFoundError",
    "AccessDeniedError",
    "StorageError",
]
