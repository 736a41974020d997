"""Merged timeline view and CSV export of an activity envelope."""

import csv
import io
from datetime import UTC, datetime

from app.services.activity.normalize import MISSING_VALUE
from app.services.activity.types import (
    ActivityEnvelope,
    ActivityRecord,
    AttachmentRecord,
    ChangelogRecord,
    CommentRecord,
)

CSV_HEADERS = ["Type", "Author", "Field/Content", "From", "To", "Date"]

TYPE_LABELS = {
    "changelog": "Change",
    "comment": "Comment",
    "attachment": "Attachment",
}


def merge_timeline(envelope: ActivityEnvelope) -> list[ActivityRecord]:
    """All records from every source, newest first."""
    records: list[ActivityRecord] = [
        *envelope.changelog,
        *envelope.comments,
        *envelope.attachments,
    ]
    records.sort(key=lambda record: record.timestamp, reverse=True)
    return records


def format_timestamp(moment: datetime) -> str:
    """ISO 8601 with a "Z" suffix, the same form the JSON envelope uses."""
    return moment.astimezone(UTC).isoformat().replace("+00:00", "Z")


def format_size_kb(size: int) -> str:
    return f"{int(size / 1024 + 0.5)}KB"


def timeline_row(record: ActivityRecord) -> list[str]:
    """Flatten one record into the CSV columns."""
    detail, from_value, to_value = MISSING_VALUE, MISSING_VALUE, MISSING_VALUE

    if isinstance(record, ChangelogRecord):
        detail, from_value, to_value = record.field, record.from_value, record.to_value
    elif isinstance(record, CommentRecord):
        detail = record.content
    elif isinstance(record, AttachmentRecord):
        detail, to_value = record.filename, format_size_kb(record.size)

    return [
        TYPE_LABELS[record.type],
        record.author,
        detail,
        from_value,
        to_value,
        format_timestamp(record.timestamp),
    ]


def timeline_to_csv(records: list[ActivityRecord]) -> str:
    """Render records as CSV text with a header row."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADERS)
    writer.writerows(timeline_row(record) for record in records)
    return output.getvalue()
