"""
Mood aggregation over a window of entries.

Pure functions that reduce a list of mood entries into weekday averages,
label frequencies, the current positive-day streak and the summary
statistics shown on the dashboard. None of these raise on empty input;
every result degrades to its zero or empty form.
"""

import statistics
from collections import Counter
from dataclasses import dataclass
from datetime import timedelta
from itertools import groupby
from typing import Iterable, List, Optional, Sequence

from .records import MoodEntry
from .scoring import POSITIVE_THRESHOLD, is_non_negative, round_half_up, score_of, weekday_index

TOP_FACTOR_LIMIT = 4
RECENT_MOOD_LIMIT = 7
LOW_MOOD_RUN = 3


@dataclass(frozen=True)
class LabelCount:
    """A label with its occurrence count."""

    label: str
    value: int


@dataclass(frozen=True)
class MoodPoint:
    """One point of the recent-mood chart."""

    label: str
    value: int
    mood: str


@dataclass(frozen=True)
class RiskPattern:
    """A rule-detected concerning pattern in recent entries."""

    category: str
    message: str
    score: int


def weekly_averages(entries: Iterable[MoodEntry]) -> List[float]:
    """Average score per weekday, Monday first, rounded to 2 places (0 for empty days)."""
    buckets: List[List[int]] = [[] for _ in range(7)]
    for entry in entries:
        buckets[weekday_index(entry.recorded_at)].append(score_of(entry.mood))
    return [round(sum(scores) / len(scores), 2) if scores else 0.0 for scores in buckets]


def _ranked(labels: Iterable[str]) -> List[LabelCount]:
    # Counter keeps first-encounter order and sorted() is stable, so ties
    # stay in encounter order.
    counts = Counter(labels)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [LabelCount(label=label, value=count) for label, count in ranked]


def mood_distribution(entries: Iterable[MoodEntry]) -> List[LabelCount]:
    """Occurrences of each literal mood label, most frequent first."""
    return _ranked(entry.mood for entry in entries)


def top_factors(entries: Iterable[MoodEntry], limit: int = TOP_FACTOR_LIMIT) -> List[LabelCount]:
    """The most frequently tagged contributing factors."""
    tags = (
        factor.strip()
        for entry in entries
        for factor in entry.factors
        if factor and factor.strip()
    )
    return _ranked(tags)[:limit]


def current_streak(entries: Iterable[MoodEntry]) -> int:
    """
    Count the most recent run of consecutive calendar days with a non-negative mood.

    Entries are collapsed per day, newest first. A day counts once when any
    of its entries scores 3 or more. The walk stops at the first day without
    a qualifying entry or at the first gap between days.
    """
    ordered = sorted(entries, key=lambda entry: entry.recorded_at, reverse=True)

    streak = 0
    previous_day = None
    for day, day_entries in groupby(ordered, key=lambda entry: entry.recorded_at.date()):
        if previous_day is not None and day != previous_day - timedelta(days=1):
            break
        if not any(is_non_negative(entry.mood) for entry in day_entries):
            break
        streak += 1
        previous_day = day
    return streak


def average_mood(entries: Sequence[MoodEntry]) -> Optional[float]:
    """Mean mapped score rounded to 2 places, or None without entries."""
    if not entries:
        return None
    return round(sum(score_of(entry.mood) for entry in entries) / len(entries), 2)


def wellness_score(entries: Sequence[MoodEntry]) -> Optional[int]:
    """Mean score rescaled to 0-100, or None without entries."""
    if not entries:
        return None
    mean = sum(score_of(entry.mood) for entry in entries) / len(entries)
    return round_half_up(mean * 20)


def progress_milestone(entries: Sequence[MoodEntry]) -> float:
    """Share of entries labelled Happy."""
    if not entries:
        return 0.0
    happy = sum(1 for entry in entries if entry.mood == "Happy")
    return round(happy / len(entries), 2)


def has_low_mood_pattern(weekly: Sequence[float], run: int = LOW_MOOD_RUN) -> bool:
    """True when ``run`` consecutive weekday buckets average between 0 and 3."""
    consecutive = 0
    for value in weekly:
        if 0 < value < POSITIVE_THRESHOLD:
            consecutive += 1
            if consecutive >= run:
                return True
        else:
            consecutive = 0
    return False


def mood_stability(weekly: Sequence[float]) -> int:
    """Percentage stability of the weekday averages (100 = flat)."""
    if len(weekly) < 2:
        return 100
    spread = statistics.pstdev(weekly)
    return max(0, min(100, round_half_up(100 - (spread / 4) * 100)))


def recent_moods(entries: Sequence[MoodEntry], limit: int = RECENT_MOOD_LIMIT) -> List[MoodPoint]:
    """The most recent entries as chart points, oldest first."""
    if limit <= 0:
        return []
    ordered = sorted(entries, key=lambda entry: entry.recorded_at)
    return [
        MoodPoint(
            label=entry.recorded_at.strftime("%b %d"),
            value=score_of(entry.mood),
            mood=entry.mood,
        )
        for entry in ordered[-limit:]
    ]


def detect_risk_patterns(entries: Sequence[MoodEntry]) -> List[RiskPattern]:
    """Flag sustained low moods and frequent anger in the window."""
    if not entries:
        return []

    scores = [score_of(entry.mood) for entry in sorted(entries, key=lambda entry: entry.recorded_at)]
    patterns = []

    if all(score <= 2 for score in scores[-5:]):
        patterns.append(
            RiskPattern(
                category="Mood Decline",
                message="Recent logs show consistently low moods. Consider reaching out for support.",
                score=75,
            )
        )

    if sum(1 for score in scores if score == 1) >= 3:
        patterns.append(
            RiskPattern(
                category="High Stress",
                message="Frequent 'Angry' moods logged. Relaxation or mindfulness activities may help.",
                score=68,
            )
        )

    return patterns
