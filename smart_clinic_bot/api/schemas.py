"""Request models for the web catalog API."""

from typing import Optional

from pydantic import BaseModel, Field

from ..domain.entities import ProgressUpdate


class FavoriteRequest(BaseModel):
    telegram_id: int = Field(..., gt=0)
    content_id: int = Field(..., gt=0)


class ProgressRequest(BaseModel):
    """Partial progress update; omitted fields keep stored values."""

    progress_percent: Optional[int] = Field(None, ge=0, le=100)
    watch_time_seconds: Optional[int] = Field(None, ge=0)
    completed: Optional[bool] = None
    last_position: Optional[int] = Field(None, ge=0)
    rating: Optional[int] = Field(None, ge=1, le=5)
    review: Optional[str] = Field(None, max_length=4000)

    def to_update(self) -> ProgressUpdate:
        return ProgressUpdate(
            percent=self.progress_percent,
            seconds_watched=self.watch_time_seconds,
            completed=self.completed,
            last_position=self.last_position,
            rating=self.rating,
            review=self.review,
        )
