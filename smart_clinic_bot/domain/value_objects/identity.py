"""Telegram identity value object."""

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class TelegramIdentity:
    """Identity fields of a Telegram user, refreshed on every contact."""

    telegram_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate Telegram ID."""
        if not isinstance(self.telegram_id, int) or isinstance(self.telegram_id, bool):
            raise ValueError("Telegram ID must be an integer")

        if self.telegram_id <= 0:
            raise ValueError("Telegram ID must be positive")

    @classmethod
    def from_user(cls, user: Any) -> "TelegramIdentity":
        """Create identity from an aiogram ``User`` (or anything shaped like one)."""
        return cls(
            telegram_id=int(user.id),
            username=getattr(user, "username", None),
            first_name=getattr(user, "first_name", None),
            last_name=getattr(user, "last_name", None),
        )

    @staticmethod
    def parse_id(value: Union[str, int]) -> int:
        """Parse a Telegram ID from string or int."""
        if isinstance(value, str):
            try:
                value = int(value)
            except ValueError:
                raise ValueError(f"Invalid Telegram ID format: {value}")
        if value <= 0:
            raise ValueError("Telegram ID must be positive")
        return value
