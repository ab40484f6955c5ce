"""
Database Service - подключение к PostgreSQL

Отвечает ТОЛЬКО за:
- Connection pooling к PostgreSQL
- Подключение к нужной схеме
- Базовые операции с соединением
- Перевод ошибок драйвера в StorageError
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import asyncpg

from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


class DatabaseService:
    """Сервис для работы с базой данных"""

    def __init__(self, dsn: str, schema: str = 'public'):
        self.dsn = dsn
        self.schema = schema
        self.pool: Optional[asyncpg.Pool] = None

        logger.info(f"DatabaseService initialized for {schema} schema")

    async def initialize(self, min_size: int = 2, max_size: int = 10) -> bool:
        """Инициализация connection pool"""

        try:
            self.pool = await asyncpg.create_pool(
                dsn=self.dsn,
                server_settings={'search_path': self.schema},
                min_size=min_size,
                max_size=max_size,
                max_inactive_connection_lifetime=300,
                command_timeout=30
            )

            # Проверяем подключение к правильной схеме
            async with self.pool.acquire() as conn:
                schema = await conn.fetchval("SELECT current_schema()")
                logger.info(f"✅ Connected to database, current schema: {schema}")

                if schema != self.schema:
                    logger.warning(f"⚠️ Expected '{self.schema}' schema, got '{schema}'")

            return True

        except TRANSIENT_ERRORS as e:
            logger.error(f"❌ Failed to initialize database pool: {e}")
            return False

    @asynccontextmanager
    async def get_connection(self):
        """Получить соединение из пула"""

        if not self.pool:
            raise RuntimeError("Database pool not initialized")

        try:
            async with self.pool.acquire() as connection:
                yield connection
        except TRANSIENT_ERRORS as e:
            logger.error(f"Database operation error: {e}")
            raise StorageError("database operation", str(e)) from e

    @asynccontextmanager
    async def transaction(self):
        """Соединение внутри транзакции"""

        async with self.get_connection() as conn:
            async with conn.transaction():
                yield conn

    async def fetch_value(self, query: str, *args):
        """Получить одно значение"""

        async with self.get_connection() as conn:
            return await conn.fetchval(query, *args)

    async def fetch_one(self, query: str, *args):
        """Получить одну запись"""

        async with self.get_connection() as conn:
            return await conn.fetchrow(query, *args)

    async def fetch_all(self, query: str, *args):
        """Получить все записи"""

        async with self.get_connection() as conn:
            return await conn.fetch(query, *args)

    async def execute(self, query: str, *args):
        """Выполнить команду (INSERT/UPDATE/DELETE)"""

        async with self.get_connection() as conn:
            return await conn.execute(query, *args)

    async def close(self):
        """Закрытие пула соединений"""

        if self.pool:
            await self.pool.close()
            logger.info("Database pool closed")

    async def health_check(self) -> bool:
        """Проверка работоспособности БД"""

        try:
            result = await self.fetch_value("SELECT 1")
            return result == 1
        except (StorageError, RuntimeError) as e:
            logger.error(f"Database health check failed: {e}")
            return False
