"""Subject self-view dashboard routes.

A subject always sees their own full analytics, so the visibility
settings are not consulted here.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from wellness_analytics import AnalyticsEngine, AnalyticsSnapshot, RecordFetchError

from ..config import Settings
from ..dependencies import get_app_settings, get_engine, get_profile_store
from ..models.analytics import AnalyticsSnapshotResponse
from ..stores import SqliteProfileStore

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/wellness", tags=["Wellness Dashboard"])


def snapshot_to_response(snapshot: AnalyticsSnapshot) -> AnalyticsSnapshotResponse:
    """Convert an engine snapshot to the API response model."""
    return AnalyticsSnapshotResponse.model_validate(snapshot, from_attributes=True)


def fetch_failure(err: RecordFetchError) -> HTTPException:
    """HTTP error for a failed backing read."""
    log.error(f"[API] {err}")
    return HTTPException(
        status_code=503,
        detail=f"Wellness data is temporarily unavailable ({err.collection}). Please try again.",
    )


@router.get(
    "/subjects/{subject_id}/dashboard",
    response_model=AnalyticsSnapshotResponse,
    response_model_by_alias=True,
)
async def get_subject_dashboard(
    subject_id: str,
    range: str = Query(default="7d", description="Relative window such as 7d, 3m or 1y"),
    engine: AnalyticsEngine = Depends(get_engine),
    profiles: SqliteProfileStore = Depends(get_profile_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Get the subject's own wellness analytics for the requested window.
    Unparseable ranges fall back to the last 7 days.
    """
    if profiles.subject_name(subject_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown subject '{subject_id}'")

    try:
        snapshot = await engine.compute_self_snapshot(subject_id, range, settings.self_default_days)
    except RecordFetchError as err:
        raise fetch_failure(err) from err

    return snapshot_to_response(snapshot)
