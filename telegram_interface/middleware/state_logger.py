"""
State Logger Middleware - логирование FSM state transitions

Фиксирует смену состояния (анкета, режимы ожидания) вокруг каждого handler.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Union

from aiogram import BaseMiddleware
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

logger = logging.getLogger(__name__)


class StateLoggerMiddleware(BaseMiddleware):
    """Middleware для логирования FSM state transitions"""

    async def __call__(
        self,
        handler: Callable[[Union[Message, CallbackQuery], Dict[str, Any]], Awaitable[Any]],
        event: Union[Message, CallbackQuery],
        data: Dict[str, Any]
    ) -> Any:
        user = data.get("event_from_user")
        state: FSMContext = data.get("state")

        if not (state and user):
            return await handler(event, data)

        current_state = await state.get_state()
        logger.debug(f"🔄 FSM State [BEFORE]: user={user.id}, state={current_state or 'None'}")

        result = await handler(event, data)

        new_state = await state.get_state()
        if new_state != current_state:
            logger.info(
                f"✨ FSM State [CHANGED]: user={user.id}, "
                f"{current_state or 'None'} → {new_state or 'None'}"
            )

        return result
