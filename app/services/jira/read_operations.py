"""
Jira API read operations.

Provides the read-only calls used to build an issue's activity log:
- Changelog histories (issue detail with expand=changelog)
- Comments (comment sub-resource)
- Attachments (issue detail restricted to the attachment field)

Each method returns the raw JSON entries; normalization happens in
app.services.activity.
"""

import logging
from typing import Any
from urllib.parse import quote

from app.services.jira.constants import API_PREFIX, ATTACHMENT_PARAMS, CHANGELOG_PARAMS
from app.services.jira.helpers import handle_error_response
from app.services.jira.http_client import get_jira_client

logger = logging.getLogger(__name__)


class JiraReadOperations:
    """
    Read-only operations for Jira REST API v3.

    The caller's Authorization header is forwarded as-is; this class never
    holds credentials of its own.

    Uses a shared HTTP client singleton for connection pooling.
    """

    def __init__(self, base_url: str, authorization: str | None = None):
        self.base_url = base_url.rstrip("/")
        self._headers = {"Accept": "application/json"}
        if authorization:
            self._headers["Authorization"] = authorization

    def _issue_url(self, issue_key: str) -> str:
        # Keys come from the request body; "/", "?" and "#" must stay inside the path segment
        return f"{self.base_url}{API_PREFIX}/issue/{quote(issue_key, safe='')}"

    async def _get_json(
        self,
        url: str,
        issue_key: str,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        client = get_jira_client()
        response = await client.get(url, headers=self._headers, params=params)
        handle_error_response(response, issue_key)
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected Jira payload for {issue_key}: {type(data).__name__}")
        return data

    async def get_changelog_histories(self, issue_key: str) -> list[dict[str, Any]]:
        """
        Fetch the field-change history for an issue.

        Jira returns histories newest first when expanded on the issue
        detail endpoint.

        Returns:
            Raw history entries, each with author, created and items
        """
        data = await self._get_json(self._issue_url(issue_key), issue_key, CHANGELOG_PARAMS)
        return (data.get("changelog") or {}).get("histories") or []

    async def get_comments(self, issue_key: str) -> list[dict[str, Any]]:
        """Fetch comments for an issue (body in Atlassian Document Format)."""
        data = await self._get_json(f"{self._issue_url(issue_key)}/comment", issue_key)
        return data.get("comments") or []

    async def get_attachments(self, issue_key: str) -> list[dict[str, Any]]:
        """Fetch attachment metadata for an issue."""
        data = await self._get_json(self._issue_url(issue_key), issue_key, ATTACHMENT_PARAMS)
        return (data.get("fields") or {}).get("attachment") or []
