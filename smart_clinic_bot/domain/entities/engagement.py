"""Engagement entities: per-user progress and favorites."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .content import ContentItem


@dataclass
class ProgressUpdate:
    """Partial progress update; ``None`` keeps the stored value."""

    percent: Optional[int] = None
    seconds_watched: Optional[int] = None
    completed: Optional[bool] = None
    last_position: Optional[int] = None
    rating: Optional[int] = None
    review: Optional[str] = None


@dataclass
class EngagementRecord:
    """Progress of one user on one content item."""

    telegram_id: int
    content_id: int
    progress_percent: int = 0
    watch_time_seconds: int = 0
    completed: bool = False
    last_position: int = 0
    rating: Optional[int] = None
    review: Optional[str] = None
    last_watched_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    content: Optional[ContentItem] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "content_id": self.content_id,
            "progress_percent": self.progress_percent,
            "watch_time_seconds": self.watch_time_seconds,
            "completed": self.completed,
            "last_position": self.last_position,
            "rating": self.rating,
            "review": self.review,
            "last_watched_at": self.last_watched_at.isoformat() if self.last_watched_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
        if self.content:
            data["content"] = self.content.to_dict()
        return data

    @classmethod
    def from_record(cls, row: Mapping[str, Any], content: Optional[ContentItem] = None) -> "EngagementRecord":
        data = dict(row)
        return cls(
            telegram_id=int(data["user_id"]),
            content_id=data["content_id"],
            progress_percent=data.get("progress_percent") or 0,
            watch_time_seconds=data.get("watch_time_seconds") or 0,
            completed=bool(data.get("completed", False)),
            last_position=data.get("last_position") or 0,
            rating=data.get("rating"),
            review=data.get("review"),
            last_watched_at=data.get("last_watched_at"),
            completed_at=data.get("completed_at"),
            content=content,
        )


@dataclass
class Favorite:
    """Favorite relation between a user and a content item."""

    telegram_id: int
    content_id: int
    created_at: Optional[datetime] = None
    content: Optional[ContentItem] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "content_id": self.content_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if self.content:
            data["content"] = self.content.to_dict()
        return data
