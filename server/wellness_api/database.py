"""Read-only SQLite database connection manager for wellness data."""
import sqlite3
from contextlib import contextmanager
from typing import Generator
import logging

from .config import Settings, get_settings

log = logging.getLogger(__name__)


class DatabaseManager:
    """
    Read-only SQLite database manager for wellness data.
    Each collection lives in its own database file; the analytics API
    never writes to any of them.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    @contextmanager
    def get_mood_conn(self) -> Generator[sqlite3.Connection, None, None]:
        """Get read-only connection to the mood entry database."""
        yield from self._connect(self.settings.mood_db_path)

    @contextmanager
    def get_risk_conn(self) -> Generator[sqlite3.Connection, None, None]:
        """Get read-only connection to the risk evaluation database."""
        yield from self._connect(self.settings.risk_db_path)

    @contextmanager
    def get_profile_conn(self) -> Generator[sqlite3.Connection, None, None]:
        """Get read-only connection to the profile database (subjects, share settings, supporter links)."""
        yield from self._connect(self.settings.profile_db_path)

    def _connect(self, db_path: str) -> Generator[sqlite3.Connection, None, None]:
        """
        Create a read-only connection with proper isolation.
        Uses URI mode with mode=ro to ensure read-only access.
        """
        uri = f"file:{db_path}?mode=ro"
        log.debug(f"[STORE] Opening {uri}")
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        conn.row_factory = sqlite3.Row  # Enable dict-like row access
        try:
            yield conn
        finally:
            conn.close()
