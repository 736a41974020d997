"""Unit tests for the issue activity aggregator.

Uses a stubbed Jira source to verify:
- Filter resolution against a single captured "now"
- Per-source failure isolation
- The fail-safe empty envelope
- Issue key defaulting and strict mode
"""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi import HTTPException

from app.services.activity.aggregator import ActivityAggregator
from app.services.activity.types import ActivityEnvelope
from app.services.jira.exceptions import JiraAPIError
from tests.helpers.jira_payloads import make_attachment, make_comment, make_history

NOW = datetime(2024, 3, 5, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_source(
    histories: object = None,
    comments: object = None,
    attachments: object = None,
) -> MagicMock:
    """Jira source stub; pass a list for data or an exception to raise."""
    source = MagicMock()
    for name, value in (
        ("get_changelog_histories", histories),
        ("get_comments", comments),
        ("get_attachments", attachments),
    ):
        method = AsyncMock()
        if isinstance(value, BaseException):
            method.side_effect = value
        else:
            method.return_value = value if value is not None else []
        setattr(source, name, method)
    return source


def _full_source() -> MagicMock:
    return _make_source(
        histories=[
            make_history(
                items=[
                    {"field": "status", "fromString": "To Do", "toString": "Done"},
                    {"field": "priority", "fromString": "Low", "toString": "High"},
                ]
            )
        ],
        comments=[make_comment()],
        attachments=[make_attachment()],
    )


def _aggregator(source: MagicMock, **kwargs: object) -> ActivityAggregator:
    kwargs.setdefault("default_issue_key", "KC-24")
    kwargs.setdefault("require_issue_key", False)
    return ActivityAggregator(source, clock=lambda: NOW, **kwargs)


# ═══════════════════════════════════════════════════════════════════════════
# Happy path
# ═══════════════════════════════════════════════════════════════════════════


class TestAggregate:
    """Tests for successful aggregation."""

    @pytest.mark.anyio
    async def test_collects_all_sources(self):
        source = _full_source()

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert len(envelope.changelog) == 2
        assert len(envelope.comments) == 1
        assert len(envelope.attachments) == 1
        assert envelope.total == 4
        source.get_changelog_histories.assert_awaited_once_with("KC-1")
        source.get_comments.assert_awaited_once_with("KC-1")
        source.get_attachments.assert_awaited_once_with("KC-1")

    @pytest.mark.anyio
    async def test_changelog_items_share_author_and_timestamp(self):
        envelope = await _aggregator(_full_source()).aggregate("KC-1", "all")

        assert [r.field for r in envelope.changelog] == ["status", "priority"]
        assert {r.author for r in envelope.changelog} == {"Ada Lovelace"}
        assert len({r.date for r in envelope.changelog}) == 1

    @pytest.mark.anyio
    async def test_filter_applies_to_every_source(self):
        source = _make_source(
            histories=[
                make_history("new", created="2024-03-05T00:00:00.000+0000"),
                make_history("old", created="2024-02-01T00:00:00.000+0000"),
            ],
            comments=[
                make_comment("new", created="2024-03-04T13:00:00.000+0000"),
                make_comment("old", created="2024-03-04T11:00:00.000+0000"),
            ],
            attachments=[make_attachment(created="2024-01-01T00:00:00.000+0000")],
        )

        envelope = await _aggregator(source).aggregate("KC-1", "24h")

        assert [r.id for r in envelope.changelog] == ["changelog:new:0"]
        assert [r.comment_id for r in envelope.comments] == ["new"]
        assert envelope.attachments == []
        assert envelope.total == 2

    @pytest.mark.anyio
    async def test_filter_wrapped_in_option_object(self):
        source = _make_source(histories=[make_history(created="2023-01-01T00:00:00.000+0000")])

        envelope = await _aggregator(source).aggregate("KC-1", {"label": "Last 1 year", "value": "1y"})

        assert envelope.changelog == []

    @pytest.mark.anyio
    async def test_unknown_filter_keeps_everything(self):
        source = _make_source(histories=[make_history(created="2001-01-01T00:00:00.000+0000")])

        envelope = await _aggregator(source).aggregate("KC-1", "sometime")

        assert len(envelope.changelog) == 1

    @pytest.mark.anyio
    async def test_clock_read_once_per_call(self):
        clock = MagicMock(return_value=NOW)
        aggregator = ActivityAggregator(_full_source(), clock=clock)

        await aggregator.aggregate("KC-1", "7d")

        clock.assert_called_once()

    @pytest.mark.anyio
    async def test_all_sources_empty(self):
        envelope = await _aggregator(_make_source()).aggregate("KC-1", "all")

        assert envelope.changelog == []
        assert envelope.comments == []
        assert envelope.attachments == []
        assert envelope.total == 0
        data = envelope.model_dump(mode="json")
        assert data == {"changelog": [], "comments": [], "attachments": [], "total": 0}

    @pytest.mark.anyio
    async def test_idempotent(self):
        aggregator = _aggregator(_full_source())

        first = await aggregator.aggregate("KC-1", "30d")
        second = await aggregator.aggregate("KC-1", "30d")

        assert first == second
        assert first.model_dump(mode="json") == second.model_dump(mode="json")


# ═══════════════════════════════════════════════════════════════════════════
# Failure isolation
# ═══════════════════════════════════════════════════════════════════════════


class TestFailureIsolation:
    """Tests for degrade-to-empty behaviour."""

    @pytest.mark.anyio
    async def test_comments_transport_error_is_isolated(self):
        source = _full_source()
        source.get_comments.side_effect = httpx.ConnectError("connection reset")

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope.comments == []
        assert envelope.total == len(envelope.changelog) + 0 + len(envelope.attachments)
        assert envelope.total == 3

    @pytest.mark.anyio
    async def test_attachments_status_error_is_isolated(self):
        source = _full_source()
        source.get_attachments.side_effect = JiraAPIError("Jira API error: 500", 500)

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope.attachments == []
        assert len(envelope.changelog) == 2
        assert len(envelope.comments) == 1

    @pytest.mark.anyio
    async def test_changelog_status_error_only_empties_changelog(self):
        source = _full_source()
        source.get_changelog_histories.side_effect = JiraAPIError("Issue not found: KC-1", 404)

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope.changelog == []
        assert envelope.total == 2

    @pytest.mark.anyio
    async def test_malformed_payload_is_isolated(self):
        source = _full_source()
        source.get_comments.side_effect = ValueError("Unexpected Jira payload")

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope.comments == []
        assert envelope.total == 3

    @pytest.mark.anyio
    async def test_changelog_transport_error_returns_empty_envelope(self):
        source = _full_source()
        source.get_changelog_histories.side_effect = httpx.ConnectTimeout("timed out")

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope == ActivityEnvelope.empty()
        assert envelope.total == 0

    @pytest.mark.anyio
    async def test_non_dict_comment_empties_only_comments(self):
        source = _full_source()
        source.get_comments.return_value = [None]

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope.comments == []
        assert len(envelope.changelog) == 2
        assert len(envelope.attachments) == 1
        assert envelope.total == 3

    @pytest.mark.anyio
    async def test_malformed_changelog_item_empties_only_changelog(self):
        source = _full_source()
        source.get_changelog_histories.return_value = [make_history(items=["status"])]

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope.changelog == []
        assert len(envelope.comments) == 1
        assert len(envelope.attachments) == 1
        assert envelope.total == 2

    @pytest.mark.anyio
    async def test_bad_comment_author_empties_only_comments(self):
        source = _full_source()
        source.get_comments.return_value = [make_comment(author={"displayName": 42})]

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope.comments == []
        assert len(envelope.changelog) == 2
        assert len(envelope.attachments) == 1
        assert envelope.total == 3

    @pytest.mark.anyio
    async def test_non_string_attachment_filename_empties_only_attachments(self):
        source = _full_source()
        attachment = make_attachment()
        attachment["filename"] = 12345
        source.get_attachments.return_value = [attachment]

        envelope = await _aggregator(source).aggregate("KC-1", "all")

        assert envelope.attachments == []
        assert len(envelope.changelog) == 2
        assert len(envelope.comments) == 1
        assert envelope.total == 3

    @pytest.mark.anyio
    async def test_unexpected_error_at_boundary_returns_empty_envelope(self):
        def broken_clock() -> datetime:
            raise RuntimeError("clock unavailable")

        aggregator = ActivityAggregator(
            _full_source(), clock=broken_clock, default_issue_key="KC-24", require_issue_key=False
        )

        envelope = await aggregator.aggregate("KC-1", "all")

        assert envelope == ActivityEnvelope.empty()


# ═══════════════════════════════════════════════════════════════════════════
# Issue key resolution
# ═══════════════════════════════════════════════════════════════════════════


class TestIssueKey:
    """Tests for issue key defaulting."""

    @pytest.mark.anyio
    @pytest.mark.parametrize("issue_key", [None, ""])
    async def test_missing_key_falls_back_to_default(self, issue_key):
        source = _make_source()

        await _aggregator(source).aggregate(issue_key, "all")

        source.get_comments.assert_awaited_once_with("KC-24")

    @pytest.mark.anyio
    async def test_strict_mode_rejects_missing_key(self):
        source = _make_source()

        with pytest.raises(HTTPException) as exc_info:
            await _aggregator(source, require_issue_key=True).aggregate(None, "all")

        assert exc_info.value.status_code == 400
        assert "issueKey" in exc_info.value.detail
        source.get_changelog_histories.assert_not_awaited()
