"""
Unit Tests: Support Intake

- вопрос с текстом и/или вложением
- пустой вопрос отклоняется, длинный обрезается с предупреждением
- ответ администратора и закрытие
"""

import logging

import pytest

from smart_clinic_bot.core.exceptions import QuestionNotFoundError, ValidationError
from smart_clinic_bot.domain.entities import AttachmentKind, QuestionStatus
from smart_clinic_bot.services import TOPIC_QUESTION
from smart_clinic_bot.services.support_intake import MAX_BODY_LENGTH

from conftest import NOW, USER_ID


@pytest.fixture
def support(context):
    return context.support


@pytest.mark.asyncio
async def test_submit_text_question(support):
    question = await support.submit(USER_ID, "  Как продлить подписку?  ")

    assert question.id == 1
    assert question.body == "Как продлить подписку?"
    assert question.status is QuestionStatus.NEW
    assert question.topic == "general"
    assert question.created_at == NOW


@pytest.mark.asyncio
async def test_submit_photo_without_caption(support):
    question = await support.submit(
        USER_ID, None, attachment_id="file-1", attachment_kind=AttachmentKind.PHOTO, topic=TOPIC_QUESTION
    )

    assert question.body == ""
    assert question.has_attachment
    assert question.attachment_kind is AttachmentKind.PHOTO
    assert question.topic == TOPIC_QUESTION


@pytest.mark.asyncio
async def test_empty_question_is_rejected(support):
    with pytest.raises(ValidationError):
        await support.submit(USER_ID, "   ")

    assert await support.list_new() == []


@pytest.mark.asyncio
async def test_long_question_truncated_with_warning(support, caplog):
    with caplog.at_level(logging.WARNING, logger="smart_clinic_bot.services.support_intake"):
        question = await support.submit(USER_ID, "а" * (MAX_BODY_LENGTH + 10))

    assert len(question.body) == MAX_BODY_LENGTH
    assert f"{MAX_BODY_LENGTH + 10} > {MAX_BODY_LENGTH}" in caplog.text


@pytest.mark.asyncio
async def test_question_at_limit_is_not_reported(support, caplog):
    with caplog.at_level(logging.WARNING, logger="smart_clinic_bot.services.support_intake"):
        question = await support.submit(USER_ID, "а" * MAX_BODY_LENGTH)

    assert len(question.body) == MAX_BODY_LENGTH
    assert "truncated" not in caplog.text


@pytest.mark.asyncio
async def test_list_new_oldest_first(support, clock):
    await support.submit(USER_ID, "первый")
    clock.advance(minutes=5)
    await support.submit(USER_ID, "второй")

    questions = await support.list_new()

    assert [q.body for q in questions] == ["первый", "второй"]


@pytest.mark.asyncio
async def test_answer_marks_question_answered(support, clock):
    question = await support.submit(USER_ID, "вопрос")
    clock.advance(hours=2)

    answered = await support.answer(question.id, "ответ")

    assert answered.status is QuestionStatus.ANSWERED
    assert answered.admin_response == "ответ"
    assert answered.responded_at == clock()
    assert await support.list_new() == []


@pytest.mark.asyncio
async def test_answer_unknown_question(support):
    with pytest.raises(QuestionNotFoundError):
        await support.answer(77, "ответ")


@pytest.mark.asyncio
async def test_empty_answer_is_rejected(support):
    question = await support.submit(USER_ID, "вопрос")

    with pytest.raises(ValidationError):
        await support.answer(question.id, " ")


@pytest.mark.asyncio
async def test_close_question(support):
    question = await support.submit(USER_ID, "вопрос")

    closed = await support.close(question.id)

    assert closed.status is QuestionStatus.CLOSED
    with pytest.raises(QuestionNotFoundError):
        await support.close(99)
