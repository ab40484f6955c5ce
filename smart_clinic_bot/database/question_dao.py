"""
Question DAO - очередь вопросов в поддержку

Работает ТОЛЬКО с таблицей user_questions.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..domain.entities import QuestionStatus, SupportQuestion
from ..domain.repositories import IQuestionRepository
from .service import DatabaseService

logger = logging.getLogger(__name__)


class QuestionDAO(IQuestionRepository):
    """Data Access Object для вопросов пользователей"""

    def __init__(self, db_service: DatabaseService):
        self.db = db_service

    async def create(self, question: SupportQuestion, now: datetime) -> SupportQuestion:
        row = await self.db.fetch_one(
            """
            INSERT INTO user_questions (
                user_id, question, attachment_id, attachment_kind,
                topic, content_id, status, created_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
            """,
            question.telegram_id,
            question.body,
            question.attachment_id,
            question.attachment_kind.value if question.attachment_kind else None,
            question.topic,
            question.content_id,
            QuestionStatus.NEW.value,
            now
        )

        saved = SupportQuestion.from_record(row)
        logger.info(f"❓ Question #{saved.id} saved for user {saved.telegram_id}")
        return saved

    async def get(self, question_id: int) -> Optional[SupportQuestion]:
        row = await self.db.fetch_one("SELECT * FROM user_questions WHERE id = $1", question_id)
        return SupportQuestion.from_record(row) if row else None

    async def list_by_status(self, status: QuestionStatus, limit: int = 20) -> List[SupportQuestion]:
        rows = await self.db.fetch_all(
            """
            SELECT * FROM user_questions
            WHERE status = $1
            ORDER BY created_at, id
            LIMIT $2
            """,
            status.value,
            limit
        )
        return [SupportQuestion.from_record(row) for row in rows]

    async def set_response(self, question_id: int, response: str, now: datetime) -> Optional[SupportQuestion]:
        row = await self.db.fetch_one(
            """
            UPDATE user_questions
            SET admin_response = $2,
                responded_at = $3,
                status = $4
            WHERE id = $1
            RETURNING *
            """,
            question_id,
            response,
            now,
            QuestionStatus.ANSWERED.value
        )
        return SupportQuestion.from_record(row) if row else None

    async def set_status(self, question_id: int, status: QuestionStatus) -> Optional[SupportQuestion]:
        row = await self.db.fetch_one(
            "UPDATE user_questions SET status = $2 WHERE id = $1 RETURNING *",
            question_id,
            status.value
        )
        return SupportQuestion.from_record(row) if row else None
