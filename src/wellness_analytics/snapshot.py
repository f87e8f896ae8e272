"""
Analytics Snapshot Assembly.

Orchestrates permission normalisation, window resolution, the two record
reads and every aggregation into one immutable ``AnalyticsSnapshot`` per
(subject, window, permission set) request.

Fields owned by a denied permission are nulled or emptied rather than
dropped, so the snapshot has the same shape for every consent state.
A failed read fails the whole snapshot; there is no partial result.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from .aggregation import (
    LabelCount,
    MoodPoint,
    RiskPattern,
    average_mood,
    current_streak,
    detect_risk_patterns,
    has_low_mood_pattern,
    mood_distribution,
    mood_stability,
    progress_milestone,
    recent_moods,
    top_factors,
    wellness_score,
    weekly_averages,
)
from .insights import Insight, NarrationContext, narrate
from .permissions import FULL_ACCESS, PermissionSet, VisibilityConfig, normalize_permissions
from .records import (
    MoodEntry,
    MoodEntryStore,
    RiskEvaluationStore,
    fetch_mood_entries,
    fetch_risk_evaluations,
)
from .risk import RiskSummary, build_risk_summary
from .windows import SELF_DEFAULT_DAYS, SUPPORTER_DEFAULT_DAYS, parse_window, resolve_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotStats:
    """Headline numbers for the dashboard."""

    total_entries: int = 0
    wellness_score: Optional[int] = None
    average_mood: Optional[float] = None
    current_streak: Optional[int] = None
    most_frequent_mood: Optional[str] = None
    mood_stability: Optional[int] = None
    progress_milestone: Optional[float] = None
    low_mood_pattern: Optional[bool] = None


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Permission-filtered wellness analytics for one subject and window."""

    subject_id: str
    range: str
    permissions: PermissionSet
    since: datetime
    generated_at: datetime
    stats: SnapshotStats = field(default_factory=SnapshotStats)
    weekly_moods: Tuple[float, ...] = ()
    recent_mood: Tuple[MoodPoint, ...] = ()
    mood_distribution: Tuple[LabelCount, ...] = ()
    top_factors: Tuple[LabelCount, ...] = ()
    risk_summary: RiskSummary = field(default_factory=RiskSummary)
    insights: Tuple[Insight, ...] = ()
    risk_patterns: Tuple[RiskPattern, ...] = ()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalyticsEngine:
    """
    Builds analytics snapshots from the mood-entry and risk-evaluation stores.

    The engine holds no per-request state; one instance can serve any number
    of concurrent requests.

    Args:
        mood_store: Read access to mood entries.
        risk_store: Read access to risk evaluations.
        clock: Returns the current time (UTC-aware). Defaults to ``datetime.now``.
    """

    def __init__(
        self,
        mood_store: MoodEntryStore,
        risk_store: RiskEvaluationStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.mood_store = mood_store
        self.risk_store = risk_store
        self.clock = clock or _utcnow

    async def compute_snapshot(
        self,
        subject_id: str,
        visibility: Optional[VisibilityConfig],
        window_token: Optional[str],
        default_days: int = SUPPORTER_DEFAULT_DAYS,
    ) -> AnalyticsSnapshot:
        """
        Compute the snapshot a subject's visibility settings allow.

        Raises:
            RecordFetchError: either backing read failed.
        """
        permissions = normalize_permissions(visibility)
        return await self._assemble(subject_id, permissions, window_token, default_days)

    async def compute_self_snapshot(
        self,
        subject_id: str,
        window_token: Optional[str],
        default_days: int = SELF_DEFAULT_DAYS,
    ) -> AnalyticsSnapshot:
        """Snapshot for the subject's own dashboard (always full access)."""
        return await self._assemble(subject_id, FULL_ACCESS, window_token, default_days)

    async def compute_supporter_snapshot(
        self,
        subject_id: str,
        visibility: Optional[VisibilityConfig],
        window_token: Optional[str],
        default_days: int = SUPPORTER_DEFAULT_DAYS,
    ) -> AnalyticsSnapshot:
        """Snapshot for a linked supporter. The caller must have checked the link."""
        return await self.compute_snapshot(subject_id, visibility, window_token, default_days)

    async def compute_overview(
        self,
        subjects: Sequence[Tuple[str, Optional[VisibilityConfig]]],
        window_token: Optional[str],
        default_days: int = SUPPORTER_DEFAULT_DAYS,
    ) -> List[AnalyticsSnapshot]:
        """Supporter snapshots for several subjects, in the order given."""
        return list(
            await asyncio.gather(
                *(
                    self.compute_supporter_snapshot(subject_id, visibility, window_token, default_days)
                    for subject_id, visibility in subjects
                )
            )
        )

    async def _assemble(
        self,
        subject_id: str,
        permissions: PermissionSet,
        window_token: Optional[str],
        default_days: int,
    ) -> AnalyticsSnapshot:
        now = self.clock()
        since = resolve_window(window_token, now, default_days)

        entries, evaluations = await asyncio.gather(
            asyncio.to_thread(fetch_mood_entries, self.mood_store, subject_id, permissions, since, now),
            asyncio.to_thread(fetch_risk_evaluations, self.risk_store, subject_id),
        )

        snapshot = build_snapshot(
            subject_id=subject_id,
            permissions=permissions,
            window_token=window_token,
            since=since,
            now=now,
            entries=entries,
            risk_summary=build_risk_summary(evaluations, since),
        )
        logger.info(
            f"[ANALYTICS] Snapshot for {subject_id}: range={snapshot.range}, "
            f"entries={snapshot.stats.total_entries}, trends={permissions.allow_trends}, "
            f"wellness={permissions.allow_wellness}, alerts_only={permissions.alerts_only}"
        )
        return snapshot


def build_snapshot(
    subject_id: str,
    permissions: PermissionSet,
    window_token: Optional[str],
    since: datetime,
    now: datetime,
    entries: Sequence[MoodEntry],
    risk_summary: RiskSummary,
) -> AnalyticsSnapshot:
    """Assemble a snapshot from already-fetched records."""
    trends = permissions.allow_trends
    wellness = permissions.allow_wellness

    weekly = weekly_averages(entries) if trends else []
    distribution = mood_distribution(entries) if trends else []
    factors = top_factors(entries) if trends else []
    streak = current_streak(entries) if trends else None
    score = wellness_score(entries) if wellness else None

    stats = SnapshotStats(
        total_entries=len(entries),
        wellness_score=score,
        average_mood=average_mood(entries) if trends else None,
        current_streak=streak,
        most_frequent_mood=distribution[0].label if distribution else None,
        mood_stability=mood_stability(weekly) if trends else None,
        progress_milestone=progress_milestone(entries) if trends else None,
        low_mood_pattern=has_low_mood_pattern(weekly) if trends else None,
    )

    if not wellness:
        risk_summary = risk_summary.without_wellness()

    insights = narrate(
        NarrationContext(
            permissions=permissions,
            wellness_score=score,
            streak=streak,
            top_factor=factors[0].label if factors else None,
            latest_risk_level=risk_summary.latest_level,
        )
    )

    return AnalyticsSnapshot(
        subject_id=subject_id,
        # Unparseable tokens report the default window actually used.
        range=window_token if parse_window(window_token) else f"{(now - since).days}d",
        permissions=permissions,
        since=since,
        generated_at=now,
        stats=stats,
        weekly_moods=tuple(weekly),
        recent_mood=tuple(recent_moods(entries)) if trends else (),
        mood_distribution=tuple(distribution),
        top_factors=tuple(factors),
        risk_summary=risk_summary,
        insights=tuple(insights),
        risk_patterns=tuple(detect_risk_patterns(entries)) if trends else (),
    )
