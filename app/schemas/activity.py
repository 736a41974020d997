"""Pydantic schemas for the issue activity endpoint.

The panel posts ``{"issueKey": ..., "filter": ...}``. Older bridge versions
nest the same fields under ``payload``, and ``filter`` may be either the
selected value or the whole select option ``{"label": ..., "value": ...}``.
"""

from pydantic import BaseModel, ConfigDict, Field


class FilterOption(BaseModel):
    """A select option as sent by the panel's filter dropdown."""

    value: str | None = None
    label: str | None = None


class ActivityPayload(BaseModel):
    """Nested payload shape used by older panel builds."""

    model_config = ConfigDict(populate_by_name=True)

    issue_key: str | None = Field(default=None, alias="issueKey")
    filter: str | FilterOption | None = None


class ActivityRequest(BaseModel):
    """Inbound activity request; every field is optional."""

    model_config = ConfigDict(populate_by_name=True)

    issue_key: str | None = Field(default=None, alias="issueKey")
    filter: str | FilterOption | None = None
    payload: ActivityPayload | None = None

    def resolved_issue_key(self) -> str | None:
        """Top-level issueKey first, then payload.issueKey."""
        if self.issue_key:
            return self.issue_key
        return self.payload.issue_key if self.payload else None

    def resolved_filter(self) -> str | FilterOption | None:
        """Top-level filter first, then payload.filter."""
        if self.filter:
            return self.filter
        return self.payload.filter if self.payload else None
