"""
Support Intake - вопросы в поддержку

Свободный текст вне меню и ответы в режиме "Задать вопрос" сохраняются
как вопросы со статусом new. Администратор отвечает или закрывает вопрос.
"""

import logging
from typing import List, Optional

from ..core.exceptions import QuestionNotFoundError, ValidationError
from ..domain.entities import AttachmentKind, QuestionStatus, SupportQuestion
from ..domain.repositories import IQuestionRepository
from .clock import Clock, utc_now

logger = logging.getLogger(__name__)

TOPIC_GENERAL = "general"
TOPIC_QUESTION = "question"

MAX_BODY_LENGTH = 4000


class SupportIntake:
    """Приём вопросов пользователей"""

    def __init__(self, questions: IQuestionRepository, clock: Clock = utc_now, sla_hours: int = 24):
        self.questions = questions
        self.clock = clock
        self.sla_hours = sla_hours

    async def submit(
        self,
        telegram_id: int,
        body: Optional[str],
        attachment_id: Optional[str] = None,
        attachment_kind: Optional[AttachmentKind] = None,
        topic: Optional[str] = TOPIC_GENERAL,
        content_id: Optional[int] = None
    ) -> SupportQuestion:
        body = (body or "").strip()
        if not body and not attachment_id:
            raise ValidationError("question", body, "empty question without attachment")
        if len(body) > MAX_BODY_LENGTH:
            logger.warning(
                f"✂️ Question from {telegram_id} truncated: {len(body)} > {MAX_BODY_LENGTH} chars"
            )

        question = SupportQuestion(
            telegram_id=telegram_id,
            body=body[:MAX_BODY_LENGTH],
            attachment_id=attachment_id,
            attachment_kind=attachment_kind if attachment_id else None,
            topic=topic,
            content_id=content_id,
        )
        saved = await self.questions.create(question, self.clock())
        logger.info(
            f"📨 Support question #{saved.id} from {telegram_id} "
            f"(topic={topic}, attachment={'yes' if attachment_id else 'no'})"
        )
        return saved

    async def list_new(self, limit: int = 20) -> List[SupportQuestion]:
        return await self.questions.list_by_status(QuestionStatus.NEW, limit)

    async def answer(self, question_id: int, response: str) -> SupportQuestion:
        response = (response or "").strip()
        if not response:
            raise ValidationError("response", response, "empty response")

        question = await self.questions.set_response(question_id, response, self.clock())
        if question is None:
            raise QuestionNotFoundError(question_id)

        logger.info(f"✅ Question #{question_id} answered")
        return question

    async def close(self, question_id: int) -> SupportQuestion:
        question = await self.questions.set_status(question_id, QuestionStatus.CLOSED)
        if question is None:
            raise QuestionNotFoundError(question_id)

        logger.info(f"🗃 Question #{question_id} closed")
        return question
