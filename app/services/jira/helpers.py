"""
Jira API helper utilities.

Error response processing shared by all Jira read operations.
"""

import logging

import httpx

from app.services.jira.exceptions import JiraAPIError

logger = logging.getLogger(__name__)


def parse_retry_after(response: httpx.Response) -> int | None:
    """Get the Retry-After header as whole seconds, or None if absent/invalid."""
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def handle_error_response(response: httpx.Response, issue_key: str) -> None:
    """
    Handle common error responses from Jira API.

    Args:
        response: The HTTP response from Jira API
        issue_key: Issue key for error context (e.g. "KC-24")

    Raises:
        JiraAPIError: For authentication, authorization, rate limit or other API errors
    """
    if response.status_code == 200:
        return

    logger.debug(f"Jira returned {response.status_code} for {issue_key}: {response.text[:200]!r}")

    if response.status_code == 401:
        raise JiraAPIError("Invalid or missing Jira credentials", 401)
    elif response.status_code == 403:
        raise JiraAPIError(f"Not permitted to view issue {issue_key}", 403)
    elif response.status_code == 404:
        raise JiraAPIError(f"Issue not found: {issue_key}", 404)
    elif response.status_code == 429:
        raise JiraAPIError(
            "Jira API rate limit exceeded",
            429,
            retry_after=parse_retry_after(response),
        )
    raise JiraAPIError(f"Jira API error: {response.status_code}", response.status_code)
