"""
Issue activity package.

Usage: `from app.services.activity import ActivityAggregator, ActivityEnvelope`

Module structure:
- aggregator.py: Parallel fetch of the three sources with failure isolation
- filters.py: Relative-time filter tokens and cutoff resolution
- normalize.py: Raw Jira JSON -> activity records
- document_text.py: Plain text from Atlassian Document Format bodies
- export.py: Merged timeline and CSV export
- types.py: Record and envelope models
"""

from app.services.activity.aggregator import ActivityAggregator
from app.services.activity.export import merge_timeline, timeline_to_csv
from app.services.activity.filters import FilterToken, resolve_cutoff
from app.services.activity.types import (
    ActivityEnvelope,
    ActivityRecord,
    AttachmentRecord,
    ChangelogRecord,
    CommentRecord,
)

__all__ = [
    "ActivityAggregator",
    "FilterToken",
    "resolve_cutoff",
    "merge_timeline",
    "timeline_to_csv",
    "ActivityEnvelope",
    "ActivityRecord",
    "AttachmentRecord",
    "ChangelogRecord",
    "CommentRecord",
]
