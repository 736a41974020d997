"""Service layer: Jira API access and issue activity aggregation."""

from app.services.activity import ActivityAggregator
from app.services.jira import JiraReadOperations

__all__ = [
    "ActivityAggregator",
    "JiraReadOperations",
]
