"""
Smart Clinic Bot - Telegram-бот и API каталога для медицинского образования

- core: конфигурация, логирование, исключения
- domain: сущности, value objects, интерфейсы репозиториев, чистые сервисы
- database: PostgreSQL DAO (asyncpg) и in-memory хранилище
- services: сценарии приложения
- messages: шаблоны сообщений и клавиатур
- api: REST API (FastAPI)
"""

__version__ = "1.0.0"
