"""
Database Schema - таблицы Smart Clinic

Таблицы создаются идемпотентно (CREATE TABLE IF NOT EXISTS) при старте.
Пользователь идентифицируется telegram_id во всех зависимых таблицах.
"""

import logging

from .service import DatabaseService

logger = logging.getLogger(__name__)

USERS_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    telegram_id BIGINT UNIQUE NOT NULL,
    username VARCHAR(255),
    first_name VARCHAR(255),
    last_name VARCHAR(255),

    -- Анкета онбординга
    specialty VARCHAR(255),
    city VARCHAR(255),
    email VARCHAR(255),

    -- Подписка
    subscription_tier VARCHAR(20) NOT NULL DEFAULT 'guest',
    subscription_ends_at TIMESTAMPTZ,
    auto_renew BOOLEAN NOT NULL DEFAULT false,

    is_active BOOLEAN NOT NULL DEFAULT true,
    last_active TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

CATEGORIES_SQL = """
CREATE TABLE IF NOT EXISTS content_categories (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    kind VARCHAR(50),
    icon VARCHAR(50),
    color VARCHAR(20),
    sort_order INTEGER NOT NULL DEFAULT 0,
    is_active BOOLEAN NOT NULL DEFAULT true
)
"""

CONTENT_ITEMS_SQL = """
CREATE TABLE IF NOT EXISTS content_items (
    id SERIAL PRIMARY KEY,
    category_id INTEGER NOT NULL REFERENCES content_categories(id),
    title VARCHAR(500) NOT NULL,
    description TEXT,
    content_type VARCHAR(20) NOT NULL
        CHECK (content_type IN ('course', 'webinar', 'case_review', 'material')),
    duration INTEGER,
    price NUMERIC(10, 2) NOT NULL DEFAULT 0,
    old_price NUMERIC(10, 2),
    is_premium BOOLEAN NOT NULL DEFAULT false,
    is_free BOOLEAN NOT NULL DEFAULT false,
    instructor VARCHAR(255),
    schedule_time TIMESTAMPTZ,
    max_participants INTEGER,
    current_participants INTEGER NOT NULL DEFAULT 0,
    is_active BOOLEAN NOT NULL DEFAULT true,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CHECK (NOT (is_free AND is_premium))
)
"""

USER_PROGRESS_SQL = """
CREATE TABLE IF NOT EXISTS user_progress (
    id SERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL REFERENCES users(telegram_id) ON DELETE CASCADE,
    content_id INTEGER NOT NULL REFERENCES content_items(id) ON DELETE CASCADE,
    progress_percent INTEGER NOT NULL DEFAULT 0 CHECK (progress_percent BETWEEN 0 AND 100),
    watch_time_seconds INTEGER NOT NULL DEFAULT 0,
    completed BOOLEAN NOT NULL DEFAULT false,
    last_position INTEGER NOT NULL DEFAULT 0,
    rating SMALLINT CHECK (rating BETWEEN 1 AND 5),
    review TEXT,
    last_watched_at TIMESTAMPTZ,
    completed_at TIMESTAMPTZ,
    UNIQUE (user_id, content_id)
)
"""

USER_FAVORITES_SQL = """
CREATE TABLE IF NOT EXISTS user_favorites (
    id SERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL REFERENCES users(telegram_id) ON DELETE CASCADE,
    content_id INTEGER NOT NULL REFERENCES content_items(id) ON DELETE CASCADE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (user_id, content_id)
)
"""

USER_QUESTIONS_SQL = """
CREATE TABLE IF NOT EXISTS user_questions (
    id SERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL REFERENCES users(telegram_id) ON DELETE CASCADE,
    question TEXT NOT NULL DEFAULT '',
    attachment_id VARCHAR(255),
    attachment_kind VARCHAR(20),
    topic VARCHAR(100),
    content_id INTEGER REFERENCES content_items(id) ON DELETE SET NULL,
    status VARCHAR(20) NOT NULL DEFAULT 'new'
        CHECK (status IN ('new', 'answered', 'closed')),
    admin_response TEXT,
    responded_at TIMESTAMPTZ,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

PROMO_CODES_SQL = """
CREATE TABLE IF NOT EXISTS promo_codes (
    id SERIAL PRIMARY KEY,
    code VARCHAR(50) UNIQUE NOT NULL,
    discount_percent INTEGER CHECK (discount_percent BETWEEN 1 AND 100),
    discount_amount NUMERIC(10, 2) CHECK (discount_amount > 0),
    max_uses INTEGER,
    used_count INTEGER NOT NULL DEFAULT 0,
    valid_from TIMESTAMPTZ,
    valid_until TIMESTAMPTZ,
    is_active BOOLEAN NOT NULL DEFAULT true,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CHECK ((discount_percent IS NULL) <> (discount_amount IS NULL))
)
"""

PAYMENTS_SQL = """
CREATE TABLE IF NOT EXISTS payments (
    id SERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL REFERENCES users(telegram_id) ON DELETE CASCADE,
    plan_months INTEGER NOT NULL,
    amount NUMERIC(10, 2) NOT NULL,
    promo_code VARCHAR(50),
    status VARCHAR(20) NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'paid', 'failed', 'cancelled')),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

INDEXES_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_users_last_active ON users (last_active) WHERE is_active",
    "CREATE INDEX IF NOT EXISTS idx_content_items_category ON content_items (category_id)",
    "CREATE INDEX IF NOT EXISTS idx_content_items_schedule ON content_items (content_type, schedule_time)",
    "CREATE INDEX IF NOT EXISTS idx_user_questions_status ON user_questions (status, created_at)",
)

TABLES_SQL = (
    USERS_SQL,
    CATEGORIES_SQL,
    CONTENT_ITEMS_SQL,
    USER_PROGRESS_SQL,
    USER_FAVORITES_SQL,
    USER_QUESTIONS_SQL,
    PROMO_CODES_SQL,
    PAYMENTS_SQL,
)


async def create_tables(db: DatabaseService) -> None:
    """Создать все таблицы и индексы, если их нет"""

    async with db.transaction() as conn:
        for statement in (*TABLES_SQL, *INDEXES_SQL):
            await conn.execute(statement)

    logger.info(f"✅ Schema verified: {len(TABLES_SQL)} tables")
