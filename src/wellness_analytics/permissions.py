"""
Supporter visibility permissions.

A subject's consent settings (``VisibilityConfig``) are normalised into the
capability set (``PermissionSet``) that gates every read and every field of
an analytics snapshot. Alerts-only mode is an absolute override: it denies
trends and wellness regardless of the stored flags.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class VisibilityConfig:
    """Consent settings a subject stores for their supporters.

    ``None`` means the field was never set and takes its default.
    """

    share_mood_trends: Optional[bool] = True
    share_wellness_score: Optional[bool] = True
    share_alerts_only: Optional[bool] = False

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "VisibilityConfig":
        """Build from a stored settings mapping (snake_case or camelCase keys)."""
        data = data or {}

        def pick(snake: str, camel: str):
            if snake in data:
                return data[snake]
            return data.get(camel)

        return cls(
            share_mood_trends=pick("share_mood_trends", "shareMoodTrends"),
            share_wellness_score=pick("share_wellness_score", "shareWellnessScore"),
            share_alerts_only=pick("share_alerts_only", "shareAlertsOnly"),
        )


@dataclass(frozen=True)
class PermissionSet:
    """Resolved capabilities for one snapshot request."""

    allow_trends: bool
    allow_wellness: bool
    alerts_only: bool

    @property
    def grants_any(self) -> bool:
        """True when at least one data capability is granted."""
        return self.allow_trends or self.allow_wellness


FULL_ACCESS = PermissionSet(allow_trends=True, allow_wellness=True, alerts_only=False)


def normalize_permissions(config: Optional[VisibilityConfig]) -> PermissionSet:
    """Resolve a visibility configuration into a permission set."""
    if config is None:
        config = VisibilityConfig()

    # Alerts-only is decided first and wins over both grants.
    alerts_only = config.share_alerts_only is True
    if alerts_only:
        return PermissionSet(allow_trends=False, allow_wellness=False, alerts_only=True)

    return PermissionSet(
        allow_trends=config.share_mood_trends is not False,
        allow_wellness=config.share_wellness_score is not False,
        alerts_only=False,
    )
