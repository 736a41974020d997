"""
Process-wide HTTP client for Jira reads.

Every activity request issues three Jira GETs, and the panel repeats that on
each poll, so all of them go through one pooled AsyncClient. The client is
created on first use and closed by the application lifespan on shutdown.
"""

import logging

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

_client: httpx.AsyncClient | None = None


def get_jira_client() -> httpx.AsyncClient:
    """
    Return the pooled Jira client, creating it if missing or closed.

    The client carries no Authorization header: each request forwards the
    calling user's header, so one client serves every user.
    """
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.jira_timeout_seconds, connect=5.0),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            http2=True,
        )
        logger.debug(f"Opened Jira client (timeout {settings.jira_timeout_seconds}s)")
    return _client


async def close_jira_client() -> None:
    """Close the pooled client; the next get_jira_client() call opens a new one."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.debug("Closed Jira client")
    _client = None
