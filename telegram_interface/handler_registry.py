"""
Handler Registry - регистрация всех обработчиков бота

Отвечает за:
- Регистрацию handlers с dependency injection
- Связывание handlers с командами, состояниями и интентами меню
- Middleware и обработчик ошибок

Порядок регистрации важен: команды → админ → анкета → режимы ожидания →
кнопки меню → callbacks → fallback (вопрос в поддержку).
"""

import logging
from functools import partial

from aiogram import Dispatcher, F
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandStart, StateFilter
from aiogram.types import ErrorEvent

from smart_clinic_bot.container import ServiceContext
from smart_clinic_bot.core.exceptions import StorageError
from smart_clinic_bot.messages import MenuCommand

from .filters import AdminFilter, MenuCommandFilter
from .handlers import (
    AdminHandlers,
    CommandHandlers,
    MenuHandlers,
    OnboardingHandlers,
    SubscriptionHandlers,
    SupportHandlers,
)
from .middleware import ActivityMiddleware, StateLoggerMiddleware
from .states import OnboardingStates, SubscriptionStates, SupportStates

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """
    Регистратор всех обработчиков бота

    Использует dependency injection для передачи зависимостей в handlers.
    """

    def __init__(self, dp: Dispatcher, context: ServiceContext):
        """
        Args:
            dp: Aiogram Dispatcher
            context: ServiceContext со всеми сервисами
        """
        self.dp = dp
        self.context = context
        self.messages = context.messages
        self.admin_ids = context.settings.admin_id_list

    def register_all(self):
        """Регистрация всех handlers и middleware"""
        logger.info("🔧 Registering all handlers...")

        self._register_middleware()
        self._register_command_handlers()
        self._register_admin_handlers()
        self._register_onboarding_handlers()
        self._register_state_handlers()
        self._register_menu_handlers()
        self._register_callback_handlers()
        self._register_fallback_handlers()
        self._register_error_handler()

        logger.info("✅ All handlers registered successfully")

    def _register_middleware(self):
        """Регистрация middleware"""
        activity = ActivityMiddleware(self.context.profiles)
        self.dp.message.outer_middleware(activity)
        self.dp.callback_query.outer_middleware(activity)

        # FSM state transition logging
        self.dp.message.middleware(StateLoggerMiddleware())
        self.dp.callback_query.middleware(StateLoggerMiddleware())
        logger.info("🔄 Middleware registered: ActivityMiddleware, StateLoggerMiddleware")

    def _register_command_handlers(self):
        """Регистрация базовых команд"""
        ctx = self.context

        # /start
        self.dp.message.register(
            partial(OnboardingHandlers.cmd_start, onboarding=ctx.onboarding, messages=self.messages),
            CommandStart()
        )

        # /cancel - в любом состоянии
        self.dp.message.register(
            partial(CommandHandlers.cmd_cancel, profiles=ctx.profiles, messages=self.messages),
            Command("cancel")
        )

        self.dp.message.register(
            partial(CommandHandlers.cmd_help, messages=self.messages),
            Command("help")
        )

        self.dp.message.register(
            partial(CommandHandlers.cmd_menu, profiles=ctx.profiles, messages=self.messages),
            Command("menu")
        )

        self.dp.message.register(
            partial(CommandHandlers.cmd_profile, profiles=ctx.profiles, messages=self.messages),
            Command("profile")
        )

        self.dp.message.register(
            partial(CommandHandlers.cmd_favorites, engagement=ctx.engagement, messages=self.messages),
            Command("favorites")
        )

        self.dp.message.register(
            partial(CommandHandlers.cmd_progress, engagement=ctx.engagement, messages=self.messages),
            Command("progress")
        )

        logger.info("📝 Command handlers registered: /start, /cancel, /help, /menu, /profile, /favorites, /progress")

    def _register_admin_handlers(self):
        """Регистрация admin handlers"""
        ctx = self.context
        admin_only = AdminFilter(self.admin_ids)

        self.dp.message.register(
            partial(AdminHandlers.cmd_questions, support=ctx.support, messages=self.messages),
            Command("questions"), admin_only
        )

        self.dp.message.register(
            partial(AdminHandlers.cmd_reply, support=ctx.support, messages=self.messages),
            Command("reply"), admin_only
        )

        self.dp.message.register(
            partial(AdminHandlers.cmd_close, support=ctx.support, messages=self.messages),
            Command("close"), admin_only
        )

        self.dp.message.register(
            partial(AdminHandlers.cmd_grant, billing=ctx.billing, messages=self.messages),
            Command("grant"), admin_only
        )

        logger.info(f"🔧 Admin handlers registered ({len(self.admin_ids)} admins)")

    def _register_onboarding_handlers(self):
        """Регистрация onboarding handlers"""
        self.dp.message.register(
            partial(
                OnboardingHandlers.handle_survey_answer,
                onboarding=self.context.onboarding,
                profiles=self.context.profiles,
                messages=self.messages
            ),
            OnboardingStates.survey
        )

        logger.info("🧠 Onboarding handlers registered")

    def _register_state_handlers(self):
        """Модальные режимы: ввод вопроса и промокода"""
        ctx = self.context

        self.dp.message.register(
            partial(
                SupportHandlers.handle_question,
                support=ctx.support,
                profiles=ctx.profiles,
                messages=self.messages,
                admin_ids=self.admin_ids
            ),
            SupportStates.awaiting_question
        )

        self.dp.message.register(
            partial(
                SubscriptionHandlers.handle_promo_code,
                billing=ctx.billing,
                profiles=ctx.profiles,
                messages=self.messages
            ),
            SubscriptionStates.awaiting_promo_code
        )

        logger.info("⏳ State handlers registered: awaiting_question, awaiting_promo_code")

    def _register_menu_handlers(self):
        """Кнопки главного меню (по интенту)"""
        ctx = self.context
        settings = ctx.settings

        def menu(command: MenuCommand) -> MenuCommandFilter:
            return MenuCommandFilter(self.messages, command)

        self.dp.message.register(
            partial(MenuHandlers.show_navigation, messages=self.messages, webapp_url=settings.webapp_url),
            menu(MenuCommand.NAVIGATION)
        )

        self.dp.message.register(
            partial(MenuHandlers.show_promotions, catalog=ctx.catalog, messages=self.messages),
            menu(MenuCommand.PROMOTIONS)
        )

        self.dp.message.register(
            partial(MenuHandlers.ask_question, messages=self.messages),
            menu(MenuCommand.ASK_QUESTION)
        )

        self.dp.message.register(
            partial(SubscriptionHandlers.show_subscription, profiles=ctx.profiles, messages=self.messages),
            menu(MenuCommand.SUBSCRIPTION)
        )

        self.dp.message.register(
            partial(MenuHandlers.show_announcements, catalog=ctx.catalog, messages=self.messages),
            menu(MenuCommand.ANNOUNCEMENTS)
        )

        self.dp.message.register(
            partial(MenuHandlers.show_support, messages=self.messages, sla_hours=settings.support_sla_hours),
            menu(MenuCommand.SUPPORT)
        )

        logger.info("📋 Menu handlers registered")

    def _register_callback_handlers(self):
        """Регистрация callback handlers"""
        ctx = self.context

        self.dp.callback_query.register(
            partial(SubscriptionHandlers.callback_subscription, profiles=ctx.profiles, messages=self.messages),
            F.data == "subscription"
        )

        self.dp.callback_query.register(
            partial(SubscriptionHandlers.callback_subscribe, billing=ctx.billing, messages=self.messages),
            F.data.startswith("subscribe_")
        )

        self.dp.callback_query.register(
            partial(SubscriptionHandlers.callback_promo, messages=self.messages),
            F.data.startswith("promo_")
        )

        self.dp.callback_query.register(
            partial(SubscriptionHandlers.callback_checkout, billing=ctx.billing, messages=self.messages),
            F.data.startswith("checkout_")
        )

        self.dp.callback_query.register(
            partial(SubscriptionHandlers.callback_toggle_auto_renew, billing=ctx.billing, messages=self.messages),
            F.data == "toggle_auto_renew"
        )

        logger.info("🔘 Callback handlers registered")

    def _register_fallback_handlers(self):
        """Любое сообщение вне меню и режимов - вопрос в поддержку"""
        self.dp.message.register(
            partial(
                SupportHandlers.handle_free_text,
                support=self.context.support,
                profiles=self.context.profiles,
                messages=self.messages,
                admin_ids=self.admin_ids
            ),
            StateFilter(None)
        )
        logger.info("❓ Fallback handler registered")

    def _register_error_handler(self):
        self.dp.errors.register(self.handle_error)

    async def handle_error(self, event: ErrorEvent):
        """Ошибка в handler: логируем с traceback и отвечаем извинением"""
        exception = event.exception
        update = event.update
        logger.error(f"❌ Error while handling update {update.update_id}: {exception}", exc_info=exception)

        key = 'storage_unavailable' if isinstance(exception, StorageError) else 'error_generic'
        text = self.messages.get_message(key, 'general')

        try:
            if update.message:
                await update.message.answer(text, parse_mode='HTML')
            elif update.callback_query:
                await update.callback_query.answer(text, show_alert=True)
        except TelegramAPIError as e:
            logger.warning(f"⚠️ Could not send error reply for update {update.update_id}: {e}")

        return True
