"""Wellness analytics response models."""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

InsightTone = Literal["positive", "neutral", "warning"]


class Permissions(BaseModel):
    """Resolved supporter capabilities."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    allow_trends: bool = Field(serialization_alias="allowTrends")
    allow_wellness: bool = Field(serialization_alias="allowWellness")
    alerts_only: bool = Field(serialization_alias="alertsOnly")


class SnapshotStats(BaseModel):
    """Headline numbers; permission-gated values are null when denied."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    total_entries: int = Field(serialization_alias="totalEntries")
    wellness_score: Optional[int] = Field(default=None, serialization_alias="wellnessScore")
    average_mood: Optional[float] = Field(default=None, serialization_alias="averageMood")
    current_streak: Optional[int] = Field(default=None, serialization_alias="streak")
    most_frequent_mood: Optional[str] = Field(default=None, serialization_alias="topMood")
    mood_stability: Optional[int] = Field(default=None, serialization_alias="moodStability")
    progress_milestone: Optional[float] = Field(default=None, serialization_alias="progressMilestone")
    low_mood_pattern: Optional[bool] = Field(default=None, serialization_alias="lowMoodPattern")


class MoodPoint(BaseModel):
    """Recent mood chart point."""

    model_config = ConfigDict(from_attributes=True)

    label: str
    value: int
    mood: str


class LabelCount(BaseModel):
    """Label frequency."""

    model_config = ConfigDict(from_attributes=True)

    label: str
    value: int


class RiskHistoryPoint(BaseModel):
    """Past risk evaluation."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    level: str
    wellness_index: Optional[float] = Field(default=None, serialization_alias="wellnessIndex")
    date: datetime


class RiskSummary(BaseModel):
    """Latest AI risk evaluation for the window."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    latest_level: Optional[str] = Field(default=None, serialization_alias="latestLevel")
    wellness_index: Optional[float] = Field(default=None, serialization_alias="wellnessIndex")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")
    suggestions: list[str] = []
    history: list[RiskHistoryPoint] = []


class Insight(BaseModel):
    """Narrated observation."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    description: str
    tone: InsightTone


class RiskPattern(BaseModel):
    """Rule-detected concerning pattern."""

    model_config = ConfigDict(from_attributes=True)

    category: str
    message: str
    score: int


class AnalyticsSnapshotResponse(BaseModel):
    """Complete analytics snapshot for one subject and window."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    subject_id: str = Field(serialization_alias="subjectId")
    range: str
    permissions: Permissions
    since: datetime
    generated_at: datetime = Field(serialization_alias="generatedAt")
    stats: SnapshotStats
    weekly_moods: list[float] = Field(serialization_alias="weeklyMoods")
    recent_mood: list[MoodPoint] = Field(serialization_alias="recentMood")
    mood_distribution: list[LabelCount] = Field(serialization_alias="moodDistribution")
    top_factors: list[LabelCount] = Field(serialization_alias="topFactors")
    risk_summary: RiskSummary = Field(serialization_alias="riskSummary")
    insights: list[Insight]
    risk_patterns: list[RiskPattern] = Field(serialization_alias="riskPatterns")


class OverviewCard(BaseModel):
    """One linked subject on a supporter's overview."""

    model_config = ConfigDict(populate_by_name=True)

    subject_id: str = Field(serialization_alias="subjectId")
    name: str
    permissions: Permissions
    wellness_score: Optional[int] = Field(default=None, serialization_alias="wellnessScore")
    recent_mood: list[MoodPoint] = Field(serialization_alias="recentMood")
    latest_risk_level: Optional[str] = Field(default=None, serialization_alias="latestRiskLevel")
