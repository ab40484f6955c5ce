"""
Точка входа для запуска бота

Использование:
    python -m telegram_interface
"""

import asyncio

from smart_clinic_bot.core.config import get_settings
from smart_clinic_bot.core.logging import setup_logging

from .controller import SmartClinicController


async def main():
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)

    controller = SmartClinicController(settings)
    await controller.start()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
