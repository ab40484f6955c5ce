"""
E2E Tests: Onboarding Flow

Полный цикл анкеты через handlers бота:
/start → специализация → город → email/пропуск → профиль + главное меню

Используется настоящий FSMContext (MemoryStorage), in-memory хранилище
и mocked сообщения Telegram.
"""

from aiogram import Dispatcher
from aiogram.types import ReplyKeyboardMarkup, ReplyKeyboardRemove

import pytest

from telegram_interface.handler_registry import HandlerRegistry
from telegram_interface.handlers import CommandHandlers, OnboardingHandlers
from telegram_interface.states import OnboardingStates

from conftest import USER_ID


@pytest.fixture
def state(make_state):
    return make_state()


@pytest.fixture
def start(context, make_message, state):
    async def run():
        message = make_message("/start")
        await OnboardingHandlers.cmd_start(message, state, context.onboarding, context.messages)
        return message
    return run


@pytest.fixture
def answer(context, make_message, state):
    async def run(text=None, **kwargs):
        message = make_message(text, **kwargs)
        await OnboardingHandlers.handle_survey_answer(
            message, state, context.onboarding, context.profiles, context.messages
        )
        return message
    return run


def sent_text(message, index=-1):
    return message.answer.await_args_list[index].args[0]


def sent_markup(message, index=-1):
    return message.answer.await_args_list[index].kwargs.get("reply_markup")


# ============================================================================
# HAPPY PATH
# ============================================================================

@pytest.mark.asyncio
async def test_start_opens_survey_with_specialty_keyboard(start, state):
    message = await start()

    assert await state.get_state() == OnboardingStates.survey.state
    assert "Анна" in sent_text(message)
    labels = [b.text for row in sent_markup(message).keyboard for b in row]
    assert "🏥 Терапия" in labels
    assert "🚀 Пропустить вопрос" in labels


@pytest.mark.asyncio
async def test_specialty_city_then_skip_email(start, answer, state, context):
    """
    Тест: /start → "🏥 Терапия" → "Москва" → пропуск email

    Профиль содержит специализацию и город, email не задан.
    """
    await start()

    reply = await answer("🏥 Терапия")
    assert "Терапия" in sent_text(reply)
    assert isinstance(sent_markup(reply), ReplyKeyboardRemove)

    reply = await answer("Москва")
    assert "Москва" in sent_text(reply)
    assert "📧 Пропустить email" in [b.text for row in sent_markup(reply).keyboard for b in row]

    reply = await answer("📧 Пропустить email")

    profile = await context.profiles.find(USER_ID)
    assert profile.specialty == "Терапия"
    assert profile.city == "Москва"
    assert profile.email is None

    assert await state.get_state() is None
    assert await state.get_data() == {}

    assert "Регистрация завершена" in sent_text(reply, 0)
    assert isinstance(sent_markup(reply, 0), ReplyKeyboardRemove)
    assert "Главное меню" in sent_text(reply, 1)
    assert isinstance(sent_markup(reply, 1), ReplyKeyboardMarkup)


@pytest.mark.asyncio
async def test_full_survey_with_email(start, answer, context):
    await start()
    await answer("🧠 Психология")
    await answer("Казань")
    await answer("doctor123@mail")

    profile = await context.profiles.find(USER_ID)
    assert (profile.specialty, profile.city, profile.email) == ("Психология", "Казань", "doctor123@mail")


@pytest.mark.asyncio
async def test_skip_first_question_saves_nothing(start, answer, context, state):
    await start()

    await answer("🚀 Пропустить вопрос")

    profile = await context.profiles.find(USER_ID)
    assert profile.has_completed_survey is False
    assert await state.get_state() is None


# ============================================================================
# EDGE CASES
# ============================================================================

@pytest.mark.asyncio
async def test_invalid_email_keeps_step(start, answer, state, context):
    await start()
    await answer("Терапия")
    await answer("Москва")

    reply = await answer("not-an-email")

    assert "корректный email" in sent_text(reply)
    assert await state.get_state() == OnboardingStates.survey.state
    assert (await state.get_data())["onboarding"]["step"] == "email"
    assert await context.profiles.find(USER_ID) is None


@pytest.mark.asyncio
async def test_non_text_answer_is_refused(start, answer, state):
    await start()

    reply = await answer(None, photo=["photo"])

    assert (await state.get_data())["onboarding"]["step"] == "specialty"
    reply.answer.assert_awaited_once()


@pytest.mark.asyncio
async def test_restart_discards_open_survey(start, answer, state):
    await start()
    await answer("Терапия")

    await start()

    assert (await state.get_data())["onboarding"]["step"] == "specialty"


@pytest.mark.asyncio
async def test_cancel_leaves_survey_without_saving(start, answer, state, context, make_message):
    await start()
    await answer("Терапия")

    message = make_message("/cancel")
    await CommandHandlers.cmd_cancel(message, state, context.profiles, context.messages)

    assert await state.get_state() is None
    profile = await context.profiles.find(USER_ID)
    assert profile is None


# ============================================================================
# REGISTRY
# ============================================================================

def test_registry_registers_handlers(context):
    dp = Dispatcher()

    HandlerRegistry(dp, context).register_all()

    assert len(dp.message.handlers) >= 20
    assert len(dp.callback_query.handlers) == 5
    assert len(dp.errors.handlers) == 1
