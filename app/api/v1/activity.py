"""Issue activity endpoints (serve the activity log panel)."""

import logging

from fastapi import APIRouter, Depends, Query, Response

from app.api.deps import get_activity_aggregator
from app.schemas import ActivityRequest
from app.services.activity import (
    ActivityAggregator,
    ActivityEnvelope,
    merge_timeline,
    timeline_to_csv,
)

router = APIRouter(tags=["activity"])
logger = logging.getLogger(__name__)

FILTER_DESCRIPTION = "Time window: all, 24h, 7d, 30d, 6m or 1y (unknown values mean all)"


@router.post("/activity", response_model=ActivityEnvelope)
async def post_activity(
    body: ActivityRequest,
    aggregator: ActivityAggregator = Depends(get_activity_aggregator),
) -> ActivityEnvelope:
    """Activity envelope for the issue and filter named in the request body."""
    logger.debug(f"Activity request: {body.model_dump(by_alias=True, exclude_none=True)}")
    return await aggregator.aggregate(body.resolved_issue_key(), body.resolved_filter())


@router.get("/issues/{issue_key}/activity", response_model=ActivityEnvelope)
async def get_issue_activity(
    issue_key: str,
    filter_token: str = Query("all", alias="filter", description=FILTER_DESCRIPTION),
    aggregator: ActivityAggregator = Depends(get_activity_aggregator),
) -> ActivityEnvelope:
    """Activity envelope for one issue."""
    return await aggregator.aggregate(issue_key, filter_token)


@router.get("/issues/{issue_key}/activity.csv")
async def export_issue_activity(
    issue_key: str,
    filter_token: str = Query("all", alias="filter", description=FILTER_DESCRIPTION),
    aggregator: ActivityAggregator = Depends(get_activity_aggregator),
) -> Response:
    """Merged timeline (newest first) as a CSV download."""
    envelope = await aggregator.aggregate(issue_key, filter_token)
    csv_content = timeline_to_csv(merge_timeline(envelope))
    logger.info(f"Exported {envelope.total} activity rows for {issue_key}")
    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={issue_key}-activity.csv"},
    )
