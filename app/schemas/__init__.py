"""Request schemas."""

from app.schemas.activity import ActivityRequest, FilterOption

__all__ = [
    "ActivityRequest",
    "FilterOption",
]
