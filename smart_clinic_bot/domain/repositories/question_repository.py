"""Support question repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..entities import QuestionStatus, SupportQuestion


class IQuestionRepository(ABC):
    """Support question repository interface."""

    @abstractmethod
    async def create(self, question: SupportQuestion, now: datetime) -> SupportQuestion:
        """Persist a question and return it with its id."""
        pass

    @abstractmethod
    async def get(self, question_id: int) -> Optional[SupportQuestion]:
        pass

    @abstractmethod
    async def list_by_status(self, status: QuestionStatus, limit: int = 20) -> List[SupportQuestion]:
        """Oldest first."""
        pass

    @abstractmethod
    async def set_response(self, question_id: int, response: str, now: datetime) -> Optional[SupportQuestion]:
        """Store admin response and mark the question answered."""
        pass

    @abstractmethod
    async def set_status(self, question_id: int, status: QuestionStatus) -> Optional[SupportQuestion]:
        pass
