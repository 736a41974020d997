"""
Normalization of raw Jira entries into activity records.

Each normalizer applies the cutoff filter and maps one source's raw JSON
onto its record type. Missing nested fields fall back to placeholders
instead of failing the whole source.
"""

import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from app.services.activity.document_text import extract_text
from app.services.activity.filters import passes_cutoff
from app.services.activity.types import AttachmentRecord, ChangelogRecord, CommentRecord

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"
MISSING_VALUE = "-"
CONTENT_PLACEHOLDER = "[Content not available]"
DEFAULT_MIME_TYPE = "application/octet-stream"

# Jira emits offsets without a colon: 2024-03-01T10:15:30.123+0000
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def parse_jira_timestamp(value: Any) -> datetime | None:
    """
    Parse a Jira timestamp into an aware UTC datetime.

    Naive values are taken as UTC. Returns None for missing or malformed input.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(_COMPACT_OFFSET.sub(r"\1:\2", value.strip()))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def author_name(entry: dict[str, Any]) -> str:
    author = entry.get("author")
    if isinstance(author, dict):
        return author.get("displayName") or UNKNOWN_AUTHOR
    return UNKNOWN_AUTHOR


def _entry_time(entry: dict[str, Any], source: str) -> datetime | None:
    timestamp = parse_jira_timestamp(entry.get("created"))
    if timestamp is None:
        logger.warning(f"Skipping {source} entry {entry.get('id')!r}: bad timestamp {entry.get('created')!r}")
    return timestamp


def normalize_changelog(
    histories: Iterable[dict[str, Any]],
    cutoff: datetime | None,
) -> list[ChangelogRecord]:
    """
    Flatten history entries into one record per changed field.

    An entry changing status and priority at once yields two records that
    share its author and timestamp.
    """
    records: list[ChangelogRecord] = []
    for entry in histories:
        timestamp = _entry_time(entry, "changelog")
        if timestamp is None or not passes_cutoff(timestamp, cutoff):
            continue

        author = author_name(entry)
        history_id = entry.get("id", "")
        for index, item in enumerate(entry.get("items") or []):
            records.append(
                ChangelogRecord(
                    id=f"changelog:{history_id}:{index}",
                    author=author,
                    field=item.get("field") or MISSING_VALUE,
                    from_value=item.get("fromString") or MISSING_VALUE,
                    to_value=item.get("toString") or MISSING_VALUE,
                    date=timestamp,
                )
            )
    return records


def normalize_comments(
    comments: Iterable[dict[str, Any]],
    cutoff: datetime | None,
) -> list[CommentRecord]:
    """Map comments to records, reducing the ADF body to plain text."""
    records: list[CommentRecord] = []
    for comment in comments:
        created = _entry_time(comment, "comment")
        if created is None or not passes_cutoff(created, cutoff):
            continue

        comment_id = str(comment.get("id", ""))
        records.append(
            CommentRecord(
                id=f"comment:{comment_id}",
                author=author_name(comment),
                content=extract_text(comment.get("body")) or CONTENT_PLACEHOLDER,
                created=created,
                updated=parse_jira_timestamp(comment.get("updated")),
                comment_id=comment_id,
            )
        )
    return records


def _byte_size(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def normalize_attachments(
    attachments: Iterable[dict[str, Any]],
    cutoff: datetime | None,
) -> list[AttachmentRecord]:
    """Map attachment metadata to records."""
    records: list[AttachmentRecord] = []
    for attachment in attachments:
        created = _entry_time(attachment, "attachment")
        if created is None or not passes_cutoff(created, cutoff):
            continue

        attachment_id = str(attachment.get("id", ""))
        records.append(
            AttachmentRecord(
                id=f"attachment:{attachment_id}",
                author=author_name(attachment),
                filename=attachment.get("filename") or MISSING_VALUE,
                size=_byte_size(attachment.get("size")),
                mime_type=attachment.get("mimeType") or DEFAULT_MIME_TYPE,
                created=created,
                attachment_id=attachment_id,
                content=attachment.get("content"),
            )
        )
    return records
