"""
Unit Tests: Message Service

- рендеринг шаблонов и экранирование пользовательского текста
- клавиатуры: reply / inline / remove, скрытие кнопки без ссылки
- интенты меню и действия кнопок по метаданным шаблонов
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from aiogram.types import InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove

from smart_clinic_bot.domain.entities import Quote, get_plan
from smart_clinic_bot.domain.services import SubscriptionStatus
from smart_clinic_bot.messages import ButtonAction, MenuCommand, format_amount, format_datetime, months_label


def test_templates_loaded(messages):
    assert messages.get_available_locales() == ["ru"]
    assert {"general", "onboarding", "support", "billing", "admin"} <= set(messages.get_available_categories())


def test_missing_template_is_marked(messages):
    assert messages.get_message("nope", "general") == "[MISSING: ru.general.nope]"


def test_user_text_is_escaped(messages):
    text = messages.get_message("start", "onboarding", first_name="<b>Ivan</b>")

    assert "&lt;b&gt;Ivan&lt;/b&gt;" in text


def test_main_menu_shows_subscription_end(messages):
    status = SubscriptionStatus(active=True, ends_at=datetime(2025, 12, 31, tzinfo=timezone.utc))

    text = messages.get_message("main_menu", "general", subscription=status)

    assert "31.12.2025" in text


def test_quote_renders_discount(messages):
    quote = Quote(plan=get_plan(1), base_amount=Decimal("990"), discount=Decimal("198.00"), promo_code="WELCOME20")

    text = messages.get_message("quote", "billing", quote=quote)

    assert "792" in text
    assert "WELCOME20" in text
    assert "1 месяц" in text


# ============================================================================
# KEYBOARDS
# ============================================================================

def test_main_menu_is_reply_keyboard(messages):
    keyboard = messages.get_keyboard("main_menu")

    assert isinstance(keyboard, ReplyKeyboardMarkup)
    labels = [button.text for row in keyboard.keyboard for button in row]
    assert "💳 Подписка" in labels
    assert len(labels) == 6


def test_remove_keyboard(messages):
    assert isinstance(messages.get_keyboard("remove"), ReplyKeyboardRemove)


def test_quote_keyboard_renders_callback_data(messages):
    keyboard = messages.get_keyboard("quote", amount=Decimal("792.00"), months=1)

    assert isinstance(keyboard, InlineKeyboardMarkup)
    buttons = [button for row in keyboard.inline_keyboard for button in row]
    assert [b.callback_data for b in buttons] == ["checkout_1", "promo_1", "subscription"]
    assert buttons[0].text == "💳 Оплатить 792₽"


def test_webapp_button_hidden_without_url(messages):
    assert messages.get_keyboard("navigation", webapp_url="").inline_keyboard == []


def test_webapp_button_with_url(messages):
    keyboard = messages.get_keyboard("navigation", webapp_url="https://clinic.example.com")

    button = keyboard.inline_keyboard[0][0]
    assert button.web_app.url == "https://clinic.example.com/webapp"


# ============================================================================
# INTENTS & ACTIONS
# ============================================================================

@pytest.mark.parametrize("label, command", [
    ("📱 Навигация", MenuCommand.NAVIGATION),
    ("🎁 Акции", MenuCommand.PROMOTIONS),
    ("❓ Задать вопрос", MenuCommand.ASK_QUESTION),
    ("💳 Подписка", MenuCommand.SUBSCRIPTION),
    ("📅 Анонсы", MenuCommand.ANNOUNCEMENTS),
    ("🆘 Поддержка", MenuCommand.SUPPORT),
])
def test_menu_labels_resolve_to_commands(messages, label, command):
    assert messages.resolve_command(label) is command


def test_free_text_is_not_a_command(messages):
    assert messages.resolve_command("Подписка") is None
    assert messages.resolve_command(None) is None


def test_skip_and_cancel_labels(messages):
    assert messages.action_labels(ButtonAction.SKIP) == {"🚀 Пропустить вопрос", "📧 Пропустить email"}
    assert messages.is_action("❌ Отмена", ButtonAction.CANCEL)
    assert not messages.is_action("Отмена", ButtonAction.CANCEL)


# ============================================================================
# FORMATTERS
# ============================================================================

@pytest.mark.parametrize("months, label", [(1, "1 месяц"), (3, "3 месяца"), (12, "12 месяцев"), (21, "21 месяц")])
def test_months_label(months, label):
    assert months_label(months) == label


def test_format_amount():
    assert format_amount(Decimal("990.00")) == "990"
    assert format_amount(Decimal("792.50")) == "792.50"


def test_format_datetime():
    assert format_datetime(datetime(2025, 12, 15, 19, 0)) == "15 декабря, 19:00"
