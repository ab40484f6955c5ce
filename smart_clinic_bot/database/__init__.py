"""
Database Module - хранилище Smart Clinic

PostgreSQL (asyncpg) DAO и in-memory реализации тех же репозиториев.
"""

from .service import DatabaseService
from .schema import create_tables
from .user_dao import UserDAO
from .content_dao import ContentDAO
from .engagement_dao import EngagementDAO
from .question_dao import QuestionDAO
from .billing_dao import BillingDAO
from .memory import (
    InMemoryStore,
    InMemoryProfileRepository,
    InMemoryContentRepository,
    InMemoryEngagementRepository,
    InMemoryQuestionRepository,
    InMemoryBillingRepository,
)

__all__ = [
    'DatabaseService',
    'create_tables',
    'UserDAO',
    'ContentDAO',
    'EngagementDAO',
    'QuestionDAO',
    'BillingDAO',
    'InMemoryStore',
    'InMemoryProfileRepository',
    'InMemoryContentRepository',
    'InMemoryEngagementRepository',
    'InMemoryQuestionRepository',
    'InMemoryBillingRepository',
]
