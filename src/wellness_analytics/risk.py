"""
Risk summary construction.

Selects the risk evaluation to headline for a window and builds the short
history shown beside it. When nothing falls inside the window the most
recent evaluation overall is used, so supporters still see the latest known
risk state.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional, Tuple

from .records import RiskEvaluation

HISTORY_LIMIT = 5

ELEVATED_RISK_LEVELS = frozenset({"SERIOUS", "STRESS", "ANGER", "ANXIETY"})


@dataclass(frozen=True)
class RiskHistoryPoint:
    """A past evaluation reduced to what the history chart needs."""

    level: str
    wellness_index: Optional[float]
    date: datetime


@dataclass(frozen=True)
class RiskSummary:
    """Headline risk state plus a short history, oldest first."""

    latest_level: Optional[str] = None
    wellness_index: Optional[float] = None
    updated_at: Optional[datetime] = None
    suggestions: Tuple[str, ...] = ()
    history: Tuple[RiskHistoryPoint, ...] = ()

    @property
    def is_elevated(self) -> bool:
        return is_elevated(self.latest_level)

    def without_wellness(self) -> "RiskSummary":
        """Copy with every wellness index removed."""
        return replace(
            self,
            wellness_index=None,
            history=tuple(replace(point, wellness_index=None) for point in self.history),
        )


def is_elevated(level: Optional[str]) -> bool:
    """True for risk levels that warrant an alert."""
    return bool(level) and level.upper() in ELEVATED_RISK_LEVELS


def build_risk_summary(evaluations: Iterable[RiskEvaluation], since: datetime) -> RiskSummary:
    """Build the risk summary for a window starting at ``since``."""
    ordered = sorted(evaluations, key=lambda evaluation: evaluation.evaluated_at, reverse=True)
    if not ordered:
        return RiskSummary()

    in_window = [evaluation for evaluation in ordered if evaluation.evaluated_at >= since]
    latest = in_window[0] if in_window else ordered[0]

    history = tuple(
        RiskHistoryPoint(
            level=evaluation.risk_level,
            wellness_index=evaluation.wellness_index,
            date=evaluation.evaluated_at,
        )
        for evaluation in reversed(ordered[:HISTORY_LIMIT])
    )

    return RiskSummary(
        latest_level=latest.risk_level,
        wellness_index=latest.wellness_index,
        updated_at=latest.evaluated_at,
        suggestions=tuple(latest.suggestions),
        history=history,
    )
