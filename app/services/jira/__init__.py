"""
Jira service package.

Usage: `from app.services.jira import JiraReadOperations, JiraAPIError`

Module structure:
- read_operations.py: Read-only REST calls for changelog, comments, attachments
- helpers.py: Error response handling
- http_client.py: Shared pooled AsyncClient
- exceptions.py: Custom exceptions
- constants.py: API paths and query params
"""

from app.services.jira.exceptions import JiraAPIError
from app.services.jira.helpers import handle_error_response
from app.services.jira.http_client import close_jira_client, get_jira_client
from app.services.jira.read_operations import JiraReadOperations

__all__ = [
    "JiraReadOperations",
    "close_jira_client",
    "get_jira_client",
    "handle_error_response",
    "JiraAPIError",
]
