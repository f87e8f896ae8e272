"""Supporter analytics routes.

Supporters see a subject's analytics filtered by that subject's share
settings. The link between supporter and subject is checked before the
engine runs.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from wellness_analytics import AnalyticsEngine, RecordFetchError

from ..config import Settings
from ..dependencies import get_app_settings, get_engine, get_profile_store
from ..models.analytics import AnalyticsSnapshotResponse, MoodPoint, OverviewCard, Permissions
from ..stores import SqliteProfileStore
from .dashboard import snapshot_to_response, fetch_failure

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/wellness/supporters", tags=["Supporter Analytics"])


@router.get(
    "/{supporter_id}/subjects/{subject_id}/analytics",
    response_model=AnalyticsSnapshotResponse,
    response_model_by_alias=True,
)
async def get_subject_analytics(
    supporter_id: str,
    subject_id: str,
    range: str = Query(default="30d", description="Relative window such as 7d, 3m or 1y"),
    engine: AnalyticsEngine = Depends(get_engine),
    profiles: SqliteProfileStore = Depends(get_profile_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Get a linked subject's analytics as their share settings allow.
    Unparseable ranges fall back to the last 30 days.
    """
    if profiles.subject_name(subject_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown subject '{subject_id}'")
    if not profiles.is_linked(supporter_id, subject_id):
        log.warning(f"[API] Supporter {supporter_id} is not linked to {subject_id}")
        raise HTTPException(status_code=403, detail="You are not a trusted supporter for this person.")

    visibility = profiles.visibility_for(subject_id)
    try:
        snapshot = await engine.compute_supporter_snapshot(
            subject_id, visibility, range, settings.supporter_default_days
        )
    except RecordFetchError as err:
        raise fetch_failure(err) from err

    return snapshot_to_response(snapshot)


@router.get(
    "/{supporter_id}/overview",
    response_model=list[OverviewCard],
    response_model_by_alias=True,
)
async def get_supporter_overview(
    supporter_id: str,
    range: str = Query(default="30d", description="Relative window such as 7d, 3m or 1y"),
    engine: AnalyticsEngine = Depends(get_engine),
    profiles: SqliteProfileStore = Depends(get_profile_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Get a summary card for every subject linked to the supporter.
    Cards are returned in link order.
    """
    linked = profiles.linked_subjects(supporter_id)
    try:
        snapshots = await engine.compute_overview(
            [(subject_id, visibility) for subject_id, _, visibility in linked],
            range,
            settings.supporter_default_days,
        )
    except RecordFetchError as err:
        raise fetch_failure(err) from err

    return [
        OverviewCard(
            subject_id=snapshot.subject_id,
            name=name,
            permissions=Permissions.model_validate(snapshot.permissions, from_attributes=True),
            wellness_score=snapshot.stats.wellness_score,
            recent_mood=[MoodPoint.model_validate(point, from_attributes=True) for point in snapshot.recent_mood],
            latest_risk_level=snapshot.risk_summary.latest_level,
        )
        for (_, name, _), snapshot in zip(linked, snapshots)
    ]
