"""
Record types and the permission-guarded record fetcher.

Mood entries and risk evaluations are read-only inputs owned by other
parts of the system. The engine only sees them through the two store
protocols below, and only reads mood entries when the permission set
grants some visibility.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

from .errors import RecordFetchError
from .permissions import PermissionSet

logger = logging.getLogger(__name__)

RISK_FETCH_LIMIT = 6


@dataclass(frozen=True)
class MoodEntry:
    """One self-reported emotional check-in."""

    subject_id: str
    mood: str
    recorded_at: datetime
    factors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RiskEvaluation:
    """One AI-derived risk assessment."""

    subject_id: str
    risk_level: str
    wellness_index: float
    evaluated_at: datetime
    suggestions: Tuple[str, ...] = ()
    summary: Optional[str] = None


class MoodEntryStore(Protocol):
    """Read contract for the mood-entry collection."""

    def entries_between(self, subject_id: str, since: datetime, until: datetime) -> Sequence[MoodEntry]:
        """Entries recorded within ``[since, until]``, ascending by ``recorded_at``."""
        ...


class RiskEvaluationStore(Protocol):
    """Read contract for the risk-evaluation collection."""

    def latest_evaluations(self, subject_id: str, limit: int) -> Sequence[RiskEvaluation]:
        """The ``limit`` most recent evaluations, descending by ``evaluated_at``."""
        ...


def fetch_mood_entries(
    store: MoodEntryStore,
    subject_id: str,
    permissions: PermissionSet,
    since: datetime,
    until: datetime,
) -> Tuple[MoodEntry, ...]:
    """
    Read a subject's mood entries for the window.

    No read is issued when the permission set grants neither trends nor
    wellness; the result is then an empty tuple.

    Raises:
        RecordFetchError: the store read failed.
    """
    if not permissions.grants_any:
        logger.debug(f"[FETCH] Skipping mood read for {subject_id}: no visibility granted")
        return ()

    try:
        entries = store.entries_between(subject_id, since, until)
    except Exception as e:
        logger.error(f"[FETCH] Mood entry read failed for {subject_id}: {e}")
        raise RecordFetchError("mood entries", subject_id, str(e)) from e

    return tuple(sorted(entries, key=lambda entry: entry.recorded_at))


def fetch_risk_evaluations(
    store: RiskEvaluationStore,
    subject_id: str,
    limit: int = RISK_FETCH_LIMIT,
) -> Tuple[RiskEvaluation, ...]:
    """
    Read a subject's most recent risk evaluations, newest first.

    Raises:
        RecordFetchError: the store read failed.
    """
    try:
        evaluations = store.latest_evaluations(subject_id, limit)
    except Exception as e:
        logger.error(f"[FETCH] Risk evaluation read failed for {subject_id}: {e}")
        raise RecordFetchError("risk evaluations", subject_id, str(e)) from e

    ordered = sorted(evaluations, key=lambda evaluation: evaluation.evaluated_at, reverse=True)
    return tuple(ordered[:limit])
