"""Support question entity."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


class QuestionStatus(Enum):
    """Lifecycle of a support question."""
    NEW = "new"
    ANSWERED = "answered"
    CLOSED = "closed"


class AttachmentKind(Enum):
    PHOTO = "photo"
    DOCUMENT = "document"


@dataclass
class SupportQuestion:
    """A free-form user inquiry queued for a human reply."""

    telegram_id: int
    body: str
    id: Optional[int] = None
    attachment_id: Optional[str] = None
    attachment_kind: Optional[AttachmentKind] = None
    topic: Optional[str] = None
    content_id: Optional[int] = None
    status: QuestionStatus = QuestionStatus.NEW
    admin_response: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def has_attachment(self) -> bool:
        return self.attachment_id is not None

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "SupportQuestion":
        data = dict(row)
        kind = data.get("attachment_kind")
        return cls(
            id=data["id"],
            telegram_id=int(data["user_id"]),
            body=data.get("question") or "",
            attachment_id=data.get("attachment_id"),
            attachment_kind=AttachmentKind(kind) if kind else None,
            topic=data.get("topic"),
            content_id=data.get("content_id"),
            status=QuestionStatus(data.get("status") or QuestionStatus.NEW.value),
            admin_response=data.get("admin_response"),
            responded_at=data.get("responded_at"),
            created_at=data.get("created_at"),
        )
