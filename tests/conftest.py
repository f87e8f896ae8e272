"""
Pytest fixtures for Wellness Analytics tests.
"""
import sys
import pytest
from pathlib import Path
from datetime import datetime, timedelta, timezone
from dotenv import load_dotenv

# Ensure src/ is on sys.path so tests can import wellness_analytics without installation.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Load environment variables
load_dotenv()

from wellness_analytics import MoodEntry, RiskEvaluation  # noqa: E402


# Wednesday 12 June 2024, midday UTC. Sunday 9 June is three days earlier.
NOW = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)
SUNDAY = datetime(2024, 6, 9, 10, 0, tzinfo=timezone.utc)


# ============================================================================
# Record factories
# ============================================================================

def mood_entry(mood: str, days_ago: float = 0, factors=(), subject_id: str = "youth-1", hour: int = None) -> MoodEntry:
    """Build a mood entry ``days_ago`` days before NOW."""
    recorded_at = NOW - timedelta(days=days_ago)
    if hour is not None:
        recorded_at = recorded_at.replace(hour=hour)
    return MoodEntry(subject_id=subject_id, mood=mood, factors=tuple(factors), recorded_at=recorded_at)


def risk_evaluation(level: str, days_ago: float = 0, wellness_index: float = 60, suggestions=(), subject_id: str = "youth-1") -> RiskEvaluation:
    """Build a risk evaluation ``days_ago`` days before NOW."""
    return RiskEvaluation(
        subject_id=subject_id,
        risk_level=level,
        wellness_index=wellness_index,
        evaluated_at=NOW - timedelta(days=days_ago),
        suggestions=tuple(suggestions),
    )


# ============================================================================
# In-memory stores
# ============================================================================

class FakeMoodStore:
    """Mood store that records every query and can be told to fail."""

    def __init__(self, entries=(), error: Exception = None):
        self.entries = list(entries)
        self.error = error
        self.calls = []

    def entries_between(self, subject_id, since, until):
        self.calls.append((subject_id, since, until))
        if self.error:
            raise self.error
        return sorted(
            (e for e in self.entries if e.subject_id == subject_id and since <= e.recorded_at <= until),
            key=lambda e: e.recorded_at,
        )


class FakeRiskStore:
    """Risk store that records every query and can be told to fail."""

    def __init__(self, evaluations=(), error: Exception = None):
        self.evaluations = list(evaluations)
        self.error = error
        self.calls = []

    def latest_evaluations(self, subject_id, limit):
        self.calls.append((subject_id, limit))
        if self.error:
            raise self.error
        matching = [e for e in self.evaluations if e.subject_id == subject_id]
        return sorted(matching, key=lambda e: e.evaluated_at, reverse=True)[:limit]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_engine():
    """Factory fixture: build an AnalyticsEngine over in-memory stores with a fixed clock."""
    from wellness_analytics import AnalyticsEngine

    def _make(entries=(), evaluations=(), mood_error=None, risk_error=None):
        mood_store = FakeMoodStore(entries, mood_error)
        risk_store = FakeRiskStore(evaluations, risk_error)
        engine = AnalyticsEngine(mood_store, risk_store, clock=lambda: NOW)
        return engine, mood_store, risk_store

    return _make


# ============================================================================
# SQLite-backed API fixtures
# ============================================================================

@pytest.fixture
def wellness_data_path(tmp_path):
    """Create the three wellness databases in a temp dir with a small data set."""
    from server.wellness_api.schema import create_mood_db, create_profile_db, create_risk_db

    recent = datetime.now(timezone.utc).replace(microsecond=0)

    create_mood_db(
        str(tmp_path / "mood_entries.db"),
        [
            {"entry_id": "m1", "subject_id": "youth-ava", "mood": "Happy", "factors": ["Sleep", "Friends"], "recorded_at": recent - timedelta(days=2)},
            {"entry_id": "m2", "subject_id": "youth-ava", "mood": "Neutral", "factors": ["Sleep"], "recorded_at": recent - timedelta(days=1)},
            {"entry_id": "m3", "subject_id": "youth-ava", "mood": "Happy", "factors": [], "recorded_at": recent - timedelta(hours=1)},
            {"entry_id": "m4", "subject_id": "youth-ava", "mood": "Sad", "factors": ["School"], "recorded_at": recent - timedelta(days=20)},
            {"entry_id": "m5", "subject_id": "youth-leo", "mood": "Angry", "factors": ["School"], "recorded_at": recent - timedelta(days=1)},
        ],
    )
    create_risk_db(
        str(tmp_path / "risk_evaluations.db"),
        [
            {"evaluation_id": "r1", "subject_id": "youth-ava", "risk_level": "LOW", "wellness_index": 82, "suggestions": ["Keep journaling"], "evaluated_at": recent - timedelta(days=3)},
            {"evaluation_id": "r2", "subject_id": "youth-mia", "risk_level": "ANXIETY", "wellness_index": 41, "suggestions": ["Breathe"], "evaluated_at": recent - timedelta(days=40)},
        ],
    )
    create_profile_db(
        str(tmp_path / "profiles.db"),
        subjects=[
            {"subject_id": "youth-ava", "name": "Ava"},
            {"subject_id": "youth-leo", "name": "Leo"},
            {"subject_id": "youth-mia", "name": "Mia"},
        ],
        share_settings=[
            {"subject_id": "youth-leo", "share_mood_trends": False, "share_wellness_score": True, "share_alerts_only": False},
            {"subject_id": "youth-mia", "share_mood_trends": True, "share_wellness_score": True, "share_alerts_only": True},
        ],
        links=[("supporter-sam", "youth-mia"), ("supporter-sam", "youth-ava"), ("supporter-sam", "youth-leo")],
    )
    return tmp_path


@pytest.fixture
def api_client(wellness_data_path):
    """FastAPI TestClient wired to the temp databases."""
    from fastapi.testclient import TestClient

    from server.wellness_api.config import Settings
    from server.wellness_api.database import DatabaseManager
    from server.wellness_api.dependencies import get_app_settings, get_engine, get_profile_store
    from server.wellness_api.main import app
    from server.wellness_api.stores import SqliteMoodEntryStore, SqliteProfileStore, SqliteRiskEvaluationStore
    from wellness_analytics import AnalyticsEngine

    settings = Settings(data_path=str(wellness_data_path))
    db = DatabaseManager(settings)

    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_engine] = lambda: AnalyticsEngine(SqliteMoodEntryStore(db), SqliteRiskEvaluationStore(db))
    app.dependency_overrides[get_profile_store] = lambda: SqliteProfileStore(db)

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
