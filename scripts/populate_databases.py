#!/usr/bin/env python3
"""
Populate SQLite databases with demo wellness data.

Creates the mood entry, risk evaluation and profile databases the
Wellness Analytics API reads from, filled with a few weeks of generated
check-ins for a handful of demo subjects and one supporter.

Usage:
    python scripts/populate_databases.py [--days 60] [--seed 7]
"""
import argparse
import os
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Project root so the server package imports without installation
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR))

from server.wellness_api.schema import create_mood_db, create_profile_db, create_risk_db  # noqa: E402

MOODS = ["Happy", "Neutral", "Sad", "Angry", "Tired"]
FACTORS = ["Sleep", "School", "Friends", "Family", "Exercise", "Work", "Weather", "Screen time"]
RISK_LEVELS = ["LOW", "LOW", "MODERATE", "STRESS", "ANXIETY", "TIREDNESS", "MIXED", "SERIOUS"]
SUGGESTIONS = [
    "Try a 5-minute breathing exercise",
    "Take a short walk outside",
    "Reach out to a trusted friend",
    "Keep a consistent sleep schedule",
    "Write down three things you are grateful for",
]

DEMO_SUBJECTS = [
    {"subject_id": "youth-ava", "name": "Ava", "mood_weights": [5, 3, 1, 1, 1]},
    {"subject_id": "youth-leo", "name": "Leo", "mood_weights": [2, 3, 3, 1, 2]},
    {"subject_id": "youth-mia", "name": "Mia", "mood_weights": [1, 2, 4, 2, 3]},
]

DEMO_SHARE_SETTINGS = [
    {"subject_id": "youth-ava", "share_mood_trends": True, "share_wellness_score": True, "share_alerts_only": False},
    {"subject_id": "youth-leo", "share_mood_trends": False, "share_wellness_score": True, "share_alerts_only": False},
    {"subject_id": "youth-mia", "share_mood_trends": True, "share_wellness_score": True, "share_alerts_only": True},
]

DEMO_SUPPORTER = "supporter-sam"


def generate_mood_entries(rng: random.Random, now: datetime, days: int) -> list[dict]:
    """Generate zero to three check-ins per subject per day."""
    rows = []
    for subject in DEMO_SUBJECTS:
        for offset in range(days):
            day = now - timedelta(days=offset)
            for slot in range(rng.choice([0, 1, 1, 2, 3])):
                recorded_at = day.replace(hour=8 + slot * 5, minute=rng.randint(0, 59), second=0, microsecond=0)
                if recorded_at > now:
                    continue
                rows.append(
                    {
                        "entry_id": f"{subject['subject_id']}-{offset}-{slot}",
                        "subject_id": subject["subject_id"],
                        "mood": rng.choices(MOODS, weights=subject["mood_weights"])[0],
                        "factors": rng.sample(FACTORS, k=rng.randint(0, 3)),
                        "recorded_at": recorded_at,
                    }
                )
    return rows


def generate_risk_evaluations(rng: random.Random, now: datetime, days: int) -> list[dict]:
    """Generate a weekly AI risk evaluation per subject."""
    rows = []
    for subject in DEMO_SUBJECTS:
        for week, offset in enumerate(range(0, days, 7)):
            rows.append(
                {
                    "evaluation_id": f"{subject['subject_id']}-risk-{week}",
                    "subject_id": subject["subject_id"],
                    "risk_level": rng.choice(RISK_LEVELS),
                    "wellness_index": rng.randint(35, 95),
                    "summary": "Generated demo evaluation.",
                    "suggestions": rng.sample(SUGGESTIONS, k=3),
                    "evaluated_at": now - timedelta(days=offset, hours=rng.randint(0, 12)),
                }
            )
    return rows


def main() -> int:
    parser = argparse.ArgumentParser(description="Populate demo wellness databases")
    parser.add_argument("--days", type=int, default=60, help="Days of history to generate")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument(
        "--data-path",
        default=os.getenv("WELLNESS_DATA_PATH", os.getenv("DATA_PATH", str(BASE_DIR))),
        help="Directory to write the databases into",
    )
    args = parser.parse_args()

    rng = random.Random(args.seed)
    now = datetime.now(timezone.utc)
    data_path = Path(args.data_path)
    data_path.mkdir(parents=True, exist_ok=True)

    print("=" * 60)
    print("Populating Wellness Analytics databases")
    print("=" * 60)

    mood_rows = generate_mood_entries(rng, now, args.days)
    create_mood_db(str(data_path / "mood_entries.db"), mood_rows)
    print(f"  mood_entries.db: {len(mood_rows)} entries")

    risk_rows = generate_risk_evaluations(rng, now, args.days)
    create_risk_db(str(data_path / "risk_evaluations.db"), risk_rows)
    print(f"  risk_evaluations.db: {len(risk_rows)} evaluations")

    create_profile_db(
        str(data_path / "profiles.db"),
        subjects=[{"subject_id": s["subject_id"], "name": s["name"]} for s in DEMO_SUBJECTS],
        share_settings=DEMO_SHARE_SETTINGS,
        links=[(DEMO_SUPPORTER, s["subject_id"]) for s in DEMO_SUBJECTS],
    )
    print(f"  profiles.db: {len(DEMO_SUBJECTS)} subjects linked to {DEMO_SUPPORTER}")

    print("=" * 60)
    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
