"""
Issue activity aggregation.

Fetches changelog, comments and attachments for one issue in parallel,
normalizes each source and assembles the envelope served to the panel.

Failure contract: the panel cannot show an error state distinct from
"no activity", so failures degrade to empty lists instead of raising.
- A failing source (bad status, network error, malformed payload or entry)
  yields [] for that source only.
- A network-level failure of the changelog request yields the empty envelope.
- Anything unexpected at this boundary yields the empty envelope.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, Protocol, TypeVar

import httpx

from app.config import settings
from app.core.exceptions import MissingParameterError
from app.services.activity.filters import resolve_cutoff, unwrap_filter_value
from app.services.activity.normalize import (
    normalize_attachments,
    normalize_changelog,
    normalize_comments,
)
from app.services.activity.types import ActivityEnvelope
from app.services.jira.exceptions import JiraAPIError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
RecordT = TypeVar("RecordT")


class ActivitySource(Protocol):
    """The Jira reads the aggregator depends on (JiraReadOperations)."""

    async def get_changelog_histories(self, issue_key: str) -> list[dict[str, Any]]: ...

    async def get_comments(self, issue_key: str) -> list[dict[str, Any]]: ...

    async def get_attachments(self, issue_key: str) -> list[dict[str, Any]]: ...


def utc_now() -> datetime:
    return datetime.now(UTC)


class ActivityAggregator:
    """
    Builds an issue's activity envelope from three independent Jira reads.

    Stateless between calls; "now" is read once per call from the injected
    clock and used for the cutoff of every source.
    """

    def __init__(
        self,
        source: ActivitySource,
        clock: Clock = utc_now,
        default_issue_key: str | None = None,
        require_issue_key: bool | None = None,
    ):
        self.source = source
        self.clock = clock
        self.default_issue_key = (
            default_issue_key if default_issue_key is not None else settings.default_issue_key
        )
        self.require_issue_key = (
            require_issue_key if require_issue_key is not None else settings.require_issue_key
        )

    def resolve_issue_key(self, issue_key: str | None) -> str:
        """
        Return the issue to query.

        Falls back to the configured default key unless strict mode is on.

        Raises:
            MissingParameterError: If no key was given and require_issue_key is set
        """
        if issue_key:
            return issue_key
        if self.require_issue_key:
            raise MissingParameterError("issueKey")
        logger.warning(f"No issueKey supplied, falling back to {self.default_issue_key}")
        return self.default_issue_key

    async def _fetch_isolated(
        self,
        name: str,
        issue_key: str,
        fetch: Callable[[str], Awaitable[list[dict[str, Any]]]],
        propagate_transport_errors: bool = False,
    ) -> list[dict[str, Any]]:
        """Run one source fetch, degrading any failure to an empty list."""
        try:
            return await fetch(issue_key)
        except JiraAPIError as e:
            logger.warning(f"Jira {name} request for {issue_key} failed ({e.status_code}): {e.message}")
            return []
        except httpx.TransportError as e:
            if propagate_transport_errors:
                raise
            logger.warning(f"Jira {name} request for {issue_key} failed: {e!r}")
            return []
        except Exception:
            logger.exception(f"Could not read Jira {name} for {issue_key}")
            return []

    def _normalize_isolated(
        self,
        name: str,
        issue_key: str,
        normalize: Callable[[list[dict[str, Any]], datetime | None], list[RecordT]],
        raw: list[dict[str, Any]],
        cutoff: datetime | None,
    ) -> list[RecordT]:
        """Normalize one source; a malformed payload empties only that source."""
        try:
            return normalize(raw, cutoff)
        except Exception:
            logger.exception(f"Could not parse Jira {name} for {issue_key}")
            return []

    async def aggregate(self, issue_key: str | None, filter_token: Any = None) -> ActivityEnvelope:
        """
        Collect the activity of one issue.

        Args:
            issue_key: Jira issue key, e.g. "KC-24"; falls back to the default key
            filter_token: "all" | "24h" | "7d" | "30d" | "6m" | "1y", either bare or
                wrapped in an object with a ``value`` field

        Returns:
            ActivityEnvelope; empty when the issue could not be read at all
        """
        key = self.resolve_issue_key(issue_key)
        token = unwrap_filter_value(filter_token)
        logger.debug(f"Aggregating activity for {key} (filter={token!r})")

        try:
            now = self.clock()
            cutoff = resolve_cutoff(token, now)
            logger.debug(f"Cutoff for {token!r}: {cutoff.isoformat() if cutoff else 'none'}")

            histories, comments, attachments = await asyncio.gather(
                self._fetch_isolated(
                    "changelog",
                    key,
                    self.source.get_changelog_histories,
                    propagate_transport_errors=True,
                ),
                self._fetch_isolated("comments", key, self.source.get_comments),
                self._fetch_isolated("attachments", key, self.source.get_attachments),
                return_exceptions=True,
            )

            if isinstance(histories, BaseException):
                logger.error(f"Jira unreachable while reading {key}: {histories!r}")
                return ActivityEnvelope.empty()
            for result in (comments, attachments):
                if isinstance(result, BaseException):
                    raise result

            envelope = ActivityEnvelope(
                changelog=self._normalize_isolated(
                    "changelog", key, normalize_changelog, histories, cutoff
                ),
                comments=self._normalize_isolated(
                    "comments", key, normalize_comments, comments, cutoff
                ),
                attachments=self._normalize_isolated(
                    "attachments", key, normalize_attachments, attachments, cutoff
                ),
            )
        except Exception:
            logger.exception(f"Activity aggregation failed for {key}")
            return ActivityEnvelope.empty()

        logger.debug(
            f"Activity for {key}: {len(envelope.changelog)} changes, "
            f"{len(envelope.comments)} comments, {len(envelope.attachments)} attachments"
        )
        return envelope
