"""Normalized activity records returned to the issue panel.

Records form a closed union discriminated by ``type``. Timestamps are
timezone-aware UTC datetimes; display formatting is left to the client.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ChangelogRecord(BaseModel):
    """A single field change from an issue history entry."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["changelog"] = "changelog"
    id: str  # "changelog:{history_id}:{item_index}"
    author: str
    field: str
    from_value: str = Field(alias="from")
    to_value: str = Field(alias="to")
    date: datetime

    @property
    def timestamp(self) -> datetime:
        return self.date


class CommentRecord(BaseModel):
    """An issue comment with its body reduced to plain text."""

    model_config = ConfigDict(frozen=True)

    type: Literal["comment"] = "comment"
    id: str  # "comment:{comment_id}"
    author: str
    content: str
    created: datetime
    updated: datetime | None = None
    comment_id: str

    @property
    def timestamp(self) -> datetime:
        return self.created


class AttachmentRecord(BaseModel):
    """Attachment metadata. ``content`` is Jira's download URL."""

    model_config = ConfigDict(frozen=True)

    type: Literal["attachment"] = "attachment"
    id: str  # "attachment:{attachment_id}"
    author: str
    filename: str
    size: int
    mime_type: str
    created: datetime
    attachment_id: str
    content: str | None = None

    @property
    def timestamp(self) -> datetime:
        return self.created


ActivityRecord = Annotated[
    ChangelogRecord | CommentRecord | AttachmentRecord,
    Field(discriminator="type"),
]


class ActivityEnvelope(BaseModel):
    """Per-source activity lists plus their combined count.

    Order inside each list follows Jira's own ordering; the client merges
    and sorts across sources.
    """

    changelog: list[ChangelogRecord] = Field(default_factory=list)
    comments: list[CommentRecord] = Field(default_factory=list)
    attachments: list[AttachmentRecord] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return len(self.changelog) + len(self.comments) + len(self.attachments)

    @classmethod
    def empty(cls) -> "ActivityEnvelope":
        return cls()
