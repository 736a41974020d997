from fastapi import Request

from app.config import settings
from app.services.activity import ActivityAggregator
from app.services.jira import JiraReadOperations


def get_jira_reader(request: Request) -> JiraReadOperations:
    """
    Jira client acting as the calling user.

    The host platform authenticates the user; we forward its Authorization
    header to Jira unchanged.
    """
    return JiraReadOperations(
        settings.jira_base_url,
        authorization=request.headers.get("Authorization"),
    )


def get_activity_aggregator(request: Request) -> ActivityAggregator:
    """Per-request aggregator bound to the caller's Jira identity."""
    return ActivityAggregator(get_jira_reader(request))
