"""
Mood scoring helpers.

Maps categorical mood labels onto the 1-5 numeric scale used by every
aggregation, and derives the Monday-first weekday bucket of a timestamp.
"""

import math
from datetime import datetime
from typing import Optional

NEUTRAL_SCORE = 3
POSITIVE_THRESHOLD = 3  # scores at or above this count as non-negative

MOOD_SCORES = {
    "Happy": 5,
    "Neutral": 3,
    "Sad": 2,
    "Angry": 1,
    "Tired": 2,
}


def score_of(mood: Optional[str]) -> int:
    """Return the 1-5 score for a mood label. Unknown labels score neutral."""
    return MOOD_SCORES.get(mood, NEUTRAL_SCORE) if isinstance(mood, str) else NEUTRAL_SCORE


def is_non_negative(mood: Optional[str]) -> bool:
    """True when the mood maps to a score of 3 or more."""
    return score_of(mood) >= POSITIVE_THRESHOLD


def weekday_index(moment: datetime) -> int:
    """
    Return the Monday-first bucket index (Monday=0 .. Sunday=6) of a timestamp.

    Calendar day numbers from ``%w`` are Sunday-first (Sunday=0), so Sunday
    moves to the end of the week and every other day shifts left by one.
    """
    day = int(moment.strftime("%w"))
    return 6 if day == 0 else day - 1


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))
