"""Exceptions for Jira service."""


class JiraAPIError(Exception):
    """Error from Jira REST API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retry_after: int | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.retry_after = retry_after  # Seconds to wait, from Retry-After on 429
        super().__init__(message)
