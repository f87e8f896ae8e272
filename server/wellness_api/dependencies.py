"""Shared FastAPI dependencies.

Routes receive the analytics engine and profile store through these
functions so tests can swap them with ``app.dependency_overrides``.
"""
from functools import lru_cache

from wellness_analytics import AnalyticsEngine

from .config import Settings, get_settings
from .database import DatabaseManager
from .stores import SqliteMoodEntryStore, SqliteProfileStore, SqliteRiskEvaluationStore


@lru_cache
def get_db_manager() -> DatabaseManager:
    return DatabaseManager(get_settings())


def get_engine() -> AnalyticsEngine:
    db = get_db_manager()
    return AnalyticsEngine(SqliteMoodEntryStore(db), SqliteRiskEvaluationStore(db))


def get_profile_store() -> SqliteProfileStore:
    return SqliteProfileStore(get_db_manager())


def get_app_settings() -> Settings:
    return get_settings()
