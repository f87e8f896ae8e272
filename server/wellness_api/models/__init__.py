"""Pydantic models for wellness analytics API responses."""
from .analytics import (
    AnalyticsSnapshotResponse,
    Insight,
    LabelCount,
    MoodPoint,
    OverviewCard,
    Permissions,
    RiskHistoryPoint,
    RiskPattern,
    RiskSummary,
    SnapshotStats,
)

__all__ = [
    "AnalyticsSnapshotResponse",
    "Insight",
    "LabelCount",
    "MoodPoint",
    "OverviewCard",
    "Permissions",
    "RiskHistoryPoint",
    "RiskPattern",
    "RiskSummary",
    "SnapshotStats",
]
