"""
FSM States - состояния конечного автомата бота

Опрос онбординга и модальные режимы ожидания ввода.
Без состояния пользователь находится в режиме главного меню.
"""

from aiogram.fsm.state import State, StatesGroup


class OnboardingStates(StatesGroup):
    """Состояния процесса онбординга"""

    survey = State()                 # Открытая анкета, шаг хранится в данных FSM


class SupportStates(StatesGroup):
    """Режим "Задать вопрос" """

    awaiting_question = State()      # Следующее сообщение - вопрос в поддержку


class SubscriptionStates(StatesGroup):
    """Оформление подписки"""

    awaiting_promo_code = State()    # Ожидаем ввод промокода
