"""
Integration tests for the Wellness Analytics API.

Runs the FastAPI app against temporary read-only SQLite databases
(see the ``wellness_data_path`` fixture in conftest).

Usage:
    pytest tests/test_wellness_api.py -v
"""


class TestHealth:

    def test_health_check(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "wellness-analytics-api"}


class TestSubjectDashboard:

    def test_self_view_has_full_access(self, api_client):
        response = api_client.get("/api/wellness/subjects/youth-ava/dashboard")
        assert response.status_code == 200
        data = response.json()

        assert data["subjectId"] == "youth-ava"
        assert data["range"] == "7d"
        assert data["permissions"] == {"allowTrends": True, "allowWellness": True, "alertsOnly": False}
        # The Sad entry 20 days back is outside the default window
        assert data["stats"]["totalEntries"] == 3
        assert data["stats"]["wellnessScore"] == 87
        assert data["stats"]["topMood"] == "Happy"
        assert len(data["weeklyMoods"]) == 7
        assert data["topFactors"][0] == {"label": "Sleep", "value": 2}
        assert data["riskSummary"]["latestLevel"] == "LOW"
        assert data["riskSummary"]["wellnessIndex"] == 82
        assert data["riskSummary"]["suggestions"] == ["Keep journaling"]

    def test_self_view_ignores_alerts_only_setting(self, api_client):
        data = api_client.get("/api/wellness/subjects/youth-mia/dashboard").json()
        assert data["permissions"]["allowTrends"] is True
        assert data["riskSummary"]["wellnessIndex"] == 41

    def test_range_parameter(self, api_client):
        data = api_client.get("/api/wellness/subjects/youth-ava/dashboard", params={"range": "30d"}).json()
        assert data["range"] == "30d"
        assert data["stats"]["totalEntries"] == 4

    def test_unknown_subject(self, api_client):
        response = api_client.get("/api/wellness/subjects/youth-nobody/dashboard")
        assert response.status_code == 404

    def test_store_failure_is_service_unavailable(self, api_client, wellness_data_path):
        (wellness_data_path / "mood_entries.db").unlink()
        response = api_client.get("/api/wellness/subjects/youth-ava/dashboard")
        assert response.status_code == 503


class TestSupporterAnalytics:

    def test_default_visibility(self, api_client):
        response = api_client.get("/api/wellness/supporters/supporter-sam/subjects/youth-ava/analytics")
        assert response.status_code == 200
        data = response.json()

        assert data["range"] == "30d"
        assert data["stats"]["totalEntries"] == 4
        assert data["stats"]["wellnessScore"] == 75
        assert data["insights"][0]["title"] == "Positive momentum"
        assert len(data["insights"]) <= 3

    def test_trends_denied(self, api_client):
        data = api_client.get("/api/wellness/supporters/supporter-sam/subjects/youth-leo/analytics").json()

        assert data["permissions"] == {"allowTrends": False, "allowWellness": True, "alertsOnly": False}
        assert data["weeklyMoods"] == []
        assert data["moodDistribution"] == []
        assert data["topFactors"] == []
        assert data["stats"]["streak"] is None
        assert data["stats"]["topMood"] is None
        assert data["stats"]["wellnessScore"] == 20
        assert data["riskSummary"]["latestLevel"] is None

    def test_alerts_only(self, api_client):
        data = api_client.get("/api/wellness/supporters/supporter-sam/subjects/youth-mia/analytics").json()

        assert data["permissions"] == {"allowTrends": False, "allowWellness": False, "alertsOnly": True}
        assert data["stats"]["totalEntries"] == 0
        assert data["stats"]["wellnessScore"] is None
        assert data["riskSummary"]["latestLevel"] == "ANXIETY"
        assert data["riskSummary"]["wellnessIndex"] is None
        assert [insight["title"] for insight in data["insights"]] == ["Risk alert spotlight"]

    def test_unlinked_supporter_forbidden(self, api_client):
        response = api_client.get("/api/wellness/supporters/supporter-zed/subjects/youth-ava/analytics")
        assert response.status_code == 403

    def test_unknown_subject(self, api_client):
        response = api_client.get("/api/wellness/supporters/supporter-sam/subjects/youth-nobody/analytics")
        assert response.status_code == 404

    def test_invalid_range_falls_back(self, api_client):
        data = api_client.get(
            "/api/wellness/supporters/supporter-sam/subjects/youth-ava/analytics",
            params={"range": "abcd"},
        ).json()
        assert data["range"] == "30d"
        assert data["stats"]["totalEntries"] == 4


class TestOversizedRange:

    def test_dashboard_falls_back_to_default_window(self, api_client):
        response = api_client.get(
            "/api/wellness/subjects/youth-ava/dashboard",
            params={"range": "9" * 5000 + "d"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["range"] == "7d"
        assert data["stats"]["totalEntries"] == 3

    def test_supporter_analytics_falls_back_to_default_window(self, api_client):
        response = api_client.get(
            "/api/wellness/supporters/supporter-sam/subjects/youth-ava/analytics",
            params={"range": "9" * 5000 + "d"},
        )
        assert response.status_code == 200
        assert response.json()["range"] == "30d"


class TestSupporterOverview:

    def test_cards_in_link_order(self, api_client):
        response = api_client.get("/api/wellness/supporters/supporter-sam/overview")
        assert response.status_code == 200
        cards = response.json()

        assert [card["subjectId"] for card in cards] == ["youth-mia", "youth-ava", "youth-leo"]
        assert [card["name"] for card in cards] == ["Mia", "Ava", "Leo"]

        mia, ava, leo = cards
        assert mia["permissions"]["alertsOnly"] is True
        assert mia["wellnessScore"] is None
        assert mia["latestRiskLevel"] == "ANXIETY"
        assert ava["wellnessScore"] == 75
        assert len(ava["recentMood"]) == 4
        assert leo["recentMood"] == []

    def test_supporter_without_links(self, api_client):
        response = api_client.get("/api/wellness/supporters/supporter-zed/overview")
        assert response.status_code == 200
        assert response.json() == []


class TestSqliteStores:
    """Row conversion in the read-only SQLite stores."""

    def _db(self, path):
        from server.wellness_api.config import Settings
        from server.wellness_api.database import DatabaseManager

        return DatabaseManager(Settings(data_path=str(path)))

    def test_factors_and_timestamps(self, wellness_data_path):
        from datetime import datetime, timedelta, timezone

        from server.wellness_api.stores import SqliteMoodEntryStore

        now = datetime.now(timezone.utc)
        entries = SqliteMoodEntryStore(self._db(wellness_data_path)).entries_between(
            "youth-ava", now - timedelta(days=7), now
        )
        assert [entry.mood for entry in entries] == ["Happy", "Neutral", "Happy"]
        assert entries[0].factors == ("Sleep", "Friends")
        assert entries[-1].factors == ()
        assert entries[0].recorded_at.tzinfo is not None

    def test_factor_tags_keep_commas(self, tmp_path):
        from datetime import datetime, timedelta, timezone

        from server.wellness_api.schema import create_mood_db
        from server.wellness_api.stores import SqliteMoodEntryStore

        now = datetime.now(timezone.utc).replace(microsecond=0)
        create_mood_db(
            str(tmp_path / "mood_entries.db"),
            [{"entry_id": "m1", "subject_id": "youth-1", "mood": "Sad", "factors": ["Work, school", "Sleep"], "recorded_at": now - timedelta(hours=1)}],
        )
        entries = SqliteMoodEntryStore(self._db(tmp_path)).entries_between("youth-1", now - timedelta(days=1), now)
        assert entries[0].factors == ("Work, school", "Sleep")

    def test_missing_share_settings(self, wellness_data_path):
        from server.wellness_api.stores import SqliteProfileStore

        profiles = SqliteProfileStore(self._db(wellness_data_path))
        assert profiles.visibility_for("youth-ava") is None
        assert profiles.visibility_for("youth-leo").share_mood_trends is False

    def test_null_share_flags_stay_unset(self, tmp_path):
        from server.wellness_api.schema import create_profile_db
        from server.wellness_api.stores import SqliteProfileStore

        create_profile_db(
            str(tmp_path / "profiles.db"),
            subjects=[{"subject_id": "youth-1", "name": "One"}],
            share_settings=[{"subject_id": "youth-1", "share_wellness_score": False}],
            links=[("supporter-1", "youth-1")],
        )
        profiles = SqliteProfileStore(self._db(tmp_path))

        visibility = profiles.visibility_for("youth-1")
        assert visibility.share_mood_trends is None
        assert visibility.share_wellness_score is False
        assert profiles.linked_subjects("supporter-1") == [("youth-1", "One", visibility)]

    def test_malformed_suggestions(self, tmp_path):
        import sqlite3
        from datetime import datetime, timezone

        from server.wellness_api.schema import RISK_SCHEMA
        from server.wellness_api.stores import SqliteRiskEvaluationStore

        with sqlite3.connect(str(tmp_path / "risk_evaluations.db")) as conn:
            conn.executescript(RISK_SCHEMA)
            conn.execute(
                "INSERT INTO risk_evaluations (evaluation_id, subject_id, risk_level, wellness_index, suggestions, evaluated_at) "
                "VALUES ('r1', 'youth-1', 'STRESS', 44, 'not json', ?)",
                (datetime(2024, 6, 1, tzinfo=timezone.utc).isoformat(timespec="seconds"),),
            )
        conn.close()

        evaluations = SqliteRiskEvaluationStore(self._db(tmp_path)).latest_evaluations("youth-1", 6)
        assert len(evaluations) == 1
        assert evaluations[0].suggestions == ()
        assert evaluations[0].wellness_index == 44
