"""
Wellness Analytics Engine.

Turns a subject's mood entries and AI risk evaluations into a
permission-gated analytics snapshot for their own dashboard and for
linked supporters.
"""

from .errors import RecordFetchError, WellnessAnalyticsError
from .permissions import FULL_ACCESS, PermissionSet, VisibilityConfig, normalize_permissions
from .records import MoodEntry, MoodEntryStore, RiskEvaluation, RiskEvaluationStore
from .scoring import score_of, weekday_index
from .snapshot import AnalyticsEngine, AnalyticsSnapshot, SnapshotStats
from .windows import resolve_window

__all__ = [
    "AnalyticsEngine",
    "AnalyticsSnapshot",
    "SnapshotStats",
    "MoodEntry",
    "MoodEntryStore",
    "RiskEvaluation",
    "RiskEvaluationStore",
    "VisibilityConfig",
    "PermissionSet",
    "FULL_ACCESS",
    "normalize_permissions",
    "resolve_window",
    "score_of",
    "weekday_index",
    "RecordFetchError",
    "WellnessAnalyticsError",
]
