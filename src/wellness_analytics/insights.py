"""
Rule-based insight narration.

Insights are produced by an ordered table of ``(predicate, producer)``
rules. Rules run in priority order and narration stops once the cap is
reached, so the table order decides which insights win when more qualify.
The fallback rule only fires when nothing else did.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .permissions import PermissionSet
from .risk import is_elevated

INSIGHT_LIMIT = 3
STREAK_CELEBRATION_DAYS = 3

POSITIVE = "positive"
NEUTRAL = "neutral"
WARNING = "warning"


@dataclass(frozen=True)
class Insight:
    """A short human-readable observation."""

    title: str
    description: str
    tone: str


@dataclass(frozen=True)
class NarrationContext:
    """The numbers the rules look at."""

    permissions: PermissionSet
    wellness_score: Optional[int] = None
    streak: Optional[int] = None
    top_factor: Optional[str] = None
    latest_risk_level: Optional[str] = None


def _wellness_visible(context: NarrationContext) -> bool:
    return context.permissions.allow_wellness and context.wellness_score is not None


def _wellness_insight(context: NarrationContext) -> Insight:
    score = context.wellness_score
    if score >= 75:
        return Insight(
            title="Positive momentum",
            description=f"Wellness score is {score}/100. Recent check-ins show a steady upward mood.",
            tone=POSITIVE,
        )
    if score >= 55:
        return Insight(
            title="Steady but watchful",
            description=f"Wellness score is {score}/100. Things look stable; a quick check-in can keep it that way.",
            tone=NEUTRAL,
        )
    return Insight(
        title="Needs extra support",
        description=f"Wellness score is {score}/100. This may be a good time to offer some extra support.",
        tone=WARNING,
    )


def _streak_visible(context: NarrationContext) -> bool:
    return context.permissions.allow_trends and (context.streak or 0) >= STREAK_CELEBRATION_DAYS


def _streak_insight(context: NarrationContext) -> Insight:
    return Insight(
        title=f"{context.streak}-day positive streak",
        description=f"{context.streak} consecutive days of balanced or better moods. Worth celebrating together.",
        tone=POSITIVE,
    )


def _factor_visible(context: NarrationContext) -> bool:
    return context.permissions.allow_trends and bool(context.top_factor)


def _factor_insight(context: NarrationContext) -> Insight:
    return Insight(
        title=f"Top influence: {context.top_factor}",
        description=f"'{context.top_factor}' comes up most often in recent check-ins. It could be a good conversation starter.",
        tone=NEUTRAL,
    )


def _risk_elevated(context: NarrationContext) -> bool:
    return is_elevated(context.latest_risk_level)


def _risk_insight(context: NarrationContext) -> Insight:
    return Insight(
        title="Risk alert spotlight",
        description=f"The latest AI check flagged {context.latest_risk_level.upper()} risk. Reach out gently and offer support.",
        tone=WARNING,
    )


Rule = Tuple[Callable[[NarrationContext], bool], Callable[[NarrationContext], Insight]]

RULES: List[Rule] = [
    (_wellness_visible, _wellness_insight),
    (_streak_visible, _streak_insight),
    (_factor_visible, _factor_insight),
    (_risk_elevated, _risk_insight),
]

STAY_CONNECTED = Insight(
    title="Stay connected",
    description="Not much to summarise yet. Regular, low-pressure check-ins help keep the conversation open.",
    tone=NEUTRAL,
)


def narrate(context: NarrationContext, limit: int = INSIGHT_LIMIT) -> List[Insight]:
    """Run the rule table against ``context`` and return at most ``limit`` insights."""
    insights: List[Insight] = []
    for predicate, producer in RULES:
        if len(insights) >= limit:
            break
        if predicate(context):
            insights.append(producer(context))

    if not insights and limit > 0:
        insights.append(STAY_CONNECTED)
    return insights
