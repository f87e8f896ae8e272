"""SQLite-backed record stores used by the analytics engine.

These implement the engine's read contracts over the read-only wellness
databases, plus the profile lookups the HTTP layer needs (share settings,
supporter links and subject names).
"""
import json
import logging
from datetime import datetime
from typing import Optional

from wellness_analytics import MoodEntry, RiskEvaluation, VisibilityConfig

from .database import DatabaseManager
from .schema import from_db_timestamp, to_db_timestamp

log = logging.getLogger(__name__)


def _row_to_mood_entry(row) -> MoodEntry:
    """Convert SQLite row to MoodEntry."""
    try:
        tags = json.loads(row["factors"] or "[]")
    except json.JSONDecodeError:
        log.warning(f"[STORE] Malformed factors for entry {row['entry_id']}")
        tags = []
    factors = tuple(str(tag).strip() for tag in tags if str(tag).strip())
    return MoodEntry(
        subject_id=row["subject_id"],
        mood=row["mood"],
        factors=factors,
        recorded_at=from_db_timestamp(row["recorded_at"]),
    )


def _row_to_risk_evaluation(row) -> RiskEvaluation:
    """Convert SQLite row to RiskEvaluation."""
    try:
        suggestions = json.loads(row["suggestions"] or "[]")
    except json.JSONDecodeError:
        log.warning(f"[STORE] Malformed suggestions for evaluation {row['evaluation_id']}")
        suggestions = []
    return RiskEvaluation(
        subject_id=row["subject_id"],
        risk_level=row["risk_level"],
        wellness_index=float(row["wellness_index"] or 0),
        suggestions=tuple(str(item) for item in suggestions),
        evaluated_at=from_db_timestamp(row["evaluated_at"]),
        summary=row["summary"],
    )


SHARE_FLAGS = ("share_mood_trends", "share_wellness_score", "share_alerts_only")


def _row_to_visibility(row) -> VisibilityConfig:
    """Convert a share_settings row; NULL columns stay unset."""
    return VisibilityConfig.from_dict(
        {flag: None if row[flag] is None else bool(row[flag]) for flag in SHARE_FLAGS}
    )


class SqliteMoodEntryStore:
    """Mood entries, queried by subject and time range."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def entries_between(self, subject_id: str, since: datetime, until: datetime) -> list[MoodEntry]:
        with self.db.get_mood_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM mood_entries
                WHERE subject_id = ?
                AND recorded_at >= ?
                AND recorded_at <= ?
                ORDER BY recorded_at ASC
                """,
                (subject_id, to_db_timestamp(since), to_db_timestamp(until)),
            )
            rows = cursor.fetchall()
        return [_row_to_mood_entry(row) for row in rows]


class SqliteRiskEvaluationStore:
    """Risk evaluations, most recent first."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def latest_evaluations(self, subject_id: str, limit: int) -> list[RiskEvaluation]:
        with self.db.get_risk_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM risk_evaluations
                WHERE subject_id = ?
                ORDER BY evaluated_at DESC
                LIMIT ?
                """,
                (subject_id, limit),
            )
            rows = cursor.fetchall()
        return [_row_to_risk_evaluation(row) for row in rows]


class SqliteProfileStore:
    """Subject names, share settings and supporter links."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def subject_name(self, subject_id: str) -> Optional[str]:
        """Return the subject's display name, or None for an unknown subject."""
        with self.db.get_profile_conn() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM subjects WHERE subject_id = ?", (subject_id,))
            row = cursor.fetchone()
        return row["name"] if row else None

    def visibility_for(self, subject_id: str) -> Optional[VisibilityConfig]:
        """Return the subject's stored share settings, or None when never saved."""
        with self.db.get_profile_conn() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM share_settings WHERE subject_id = ?", (subject_id,))
            row = cursor.fetchone()
        return _row_to_visibility(row) if row is not None else None

    def is_linked(self, supporter_id: str, subject_id: str) -> bool:
        with self.db.get_profile_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT 1 FROM supporter_links WHERE supporter_id = ? AND subject_id = ?",
                (supporter_id, subject_id),
            )
            return cursor.fetchone() is not None

    def linked_subjects(self, supporter_id: str) -> list[tuple[str, str, Optional[VisibilityConfig]]]:
        """Return ``(subject_id, name, visibility)`` for every linked subject, in link order."""
        with self.db.get_profile_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT l.subject_id, s.name,
                       ss.subject_id AS settings_id,
                       ss.share_mood_trends, ss.share_wellness_score, ss.share_alerts_only
                FROM supporter_links l
                JOIN subjects s ON s.subject_id = l.subject_id
                LEFT JOIN share_settings ss ON ss.subject_id = l.subject_id
                WHERE l.supporter_id = ?
                ORDER BY l.position ASC
                """,
                (supporter_id,),
            )
            rows = cursor.fetchall()

        return [
            (
                row["subject_id"],
                row["name"],
                _row_to_visibility(row) if row["settings_id"] is not None else None,
            )
            for row in rows
        ]
