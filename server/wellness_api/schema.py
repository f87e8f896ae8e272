"""SQLite table definitions for the wellness databases.

The API only ever opens these databases read-only; this module is used by
``scripts/populate_databases.py`` and the test fixtures to create them.
"""
import json
import sqlite3
from datetime import datetime, timezone
from typing import Iterable

MOOD_SCHEMA = """
CREATE TABLE IF NOT EXISTS mood_entries (
    entry_id TEXT PRIMARY KEY,
    subject_id TEXT NOT NULL,
    mood TEXT NOT NULL,
    factors TEXT NOT NULL DEFAULT '[]',
    journal TEXT NOT NULL DEFAULT '',
    recorded_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_mood_subject_time ON mood_entries (subject_id, recorded_at);
"""

RISK_SCHEMA = """
CREATE TABLE IF NOT EXISTS risk_evaluations (
    evaluation_id TEXT PRIMARY KEY,
    subject_id TEXT NOT NULL,
    risk_level TEXT NOT NULL DEFAULT 'LOW',
    wellness_index REAL NOT NULL DEFAULT 0,
    summary TEXT,
    suggestions TEXT NOT NULL DEFAULT '[]',
    evaluated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_risk_subject_time ON risk_evaluations (subject_id, evaluated_at);
"""

PROFILE_SCHEMA = """
CREATE TABLE IF NOT EXISTS subjects (
    subject_id TEXT PRIMARY KEY,
    name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS share_settings (
    subject_id TEXT PRIMARY KEY,
    share_mood_trends INTEGER,
    share_wellness_score INTEGER,
    share_alerts_only INTEGER
);
CREATE TABLE IF NOT EXISTS supporter_links (
    supporter_id TEXT NOT NULL,
    subject_id TEXT NOT NULL,
    position INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (supporter_id, subject_id)
);
"""


def to_db_timestamp(moment: datetime) -> str:
    """Timestamps are stored as second-precision ISO 8601 text in UTC so they sort lexically."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds")


def from_db_timestamp(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def create_mood_db(path: str, rows: Iterable[dict] = ()) -> None:
    """Create the mood entry database and insert ``rows``."""
    with sqlite3.connect(path) as conn:
        conn.executescript(MOOD_SCHEMA)
        conn.executemany(
            """
            INSERT OR REPLACE INTO mood_entries (entry_id, subject_id, mood, factors, journal, recorded_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    row["entry_id"],
                    row["subject_id"],
                    row["mood"],
                    json.dumps(list(row.get("factors", ()))),
                    row.get("journal", ""),
                    to_db_timestamp(row["recorded_at"]),
                )
                for row in rows
            ],
        )
    conn.close()


def create_risk_db(path: str, rows: Iterable[dict] = ()) -> None:
    """Create the risk evaluation database and insert ``rows``."""
    with sqlite3.connect(path) as conn:
        conn.executescript(RISK_SCHEMA)
        conn.executemany(
            """
            INSERT OR REPLACE INTO risk_evaluations
                (evaluation_id, subject_id, risk_level, wellness_index, summary, suggestions, evaluated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    row["evaluation_id"],
                    row["subject_id"],
                    row.get("risk_level", "LOW"),
                    row.get("wellness_index", 0),
                    row.get("summary"),
                    json.dumps(list(row.get("suggestions", ()))),
                    to_db_timestamp(row["evaluated_at"]),
                )
                for row in rows
            ],
        )
    conn.close()


def _flag(value):
    return None if value is None else int(bool(value))


def create_profile_db(
    path: str,
    subjects: Iterable[dict] = (),
    share_settings: Iterable[dict] = (),
    links: Iterable[tuple] = (),
) -> None:
    """Create the profile database.

    ``links`` are ``(supporter_id, subject_id)`` pairs; their order is kept
    as the supporter's overview order.
    """
    with sqlite3.connect(path) as conn:
        conn.executescript(PROFILE_SCHEMA)
        conn.executemany(
            "INSERT OR REPLACE INTO subjects (subject_id, name) VALUES (?, ?)",
            [(row["subject_id"], row["name"]) for row in subjects],
        )
        conn.executemany(
            """
            INSERT OR REPLACE INTO share_settings
                (subject_id, share_mood_trends, share_wellness_score, share_alerts_only)
            VALUES (?, ?, ?, ?)
            """,
            [
                (
                    row["subject_id"],
                    _flag(row.get("share_mood_trends")),
                    _flag(row.get("share_wellness_score")),
                    _flag(row.get("share_alerts_only")),
                )
                for row in share_settings
            ],
        )
        conn.executemany(
            "INSERT OR REPLACE INTO supporter_links (supporter_id, subject_id, position) VALUES (?, ?, ?)",
            [(supporter_id, subject_id, position) for position, (supporter_id, subject_id) in enumerate(links)],
        )
    conn.close()
