"""Relative-time filter tokens and cutoff resolution."""

import calendar
from collections.abc import Mapping
from datetime import datetime, timedelta
from enum import Enum
from typing import Any


class FilterToken(str, Enum):
    """Time windows offered by the panel's filter dropdown."""

    ALL = "all"
    LAST_24_HOURS = "24h"
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_6_MONTHS = "6m"
    LAST_YEAR = "1y"


# Fixed-duration windows; month/year windows use calendar arithmetic
FIXED_WINDOWS: dict[FilterToken, timedelta] = {
    FilterToken.LAST_24_HOURS: timedelta(hours=24),
    FilterToken.LAST_7_DAYS: timedelta(days=7),
    FilterToken.LAST_30_DAYS: timedelta(days=30),
}


def subtract_months(moment: datetime, months: int) -> datetime:
    """
    Move a datetime back by whole calendar months.

    The day of month is clamped to the last day of the target month, so
    2024-03-31 minus 6 months is 2023-09-30 and 2024-02-29 minus 12 months
    is 2023-02-28. Time of day and tzinfo are kept.
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_filter_token(value: str | None) -> FilterToken:
    """Map a raw filter string onto a token. Unknown values mean ALL."""
    try:
        return FilterToken(value)
    except ValueError:
        return FilterToken.ALL


def unwrap_filter_value(raw: Any) -> str:
    """
    Accept the filter either as a bare string or as a select option.

    The panel sometimes sends the whole option object ({"label": ..., "value": ...})
    instead of its value.
    """
    if raw is None:
        return FilterToken.ALL.value
    if isinstance(raw, str):
        return raw
    if isinstance(raw, Mapping):
        value = raw.get("value")
    else:
        value = getattr(raw, "value", None)
    return value if isinstance(value, str) else FilterToken.ALL.value


def resolve_cutoff(token: str | FilterToken | None, now: datetime) -> datetime | None:
    """
    Convert a filter token into the earliest instant that is still shown.

    Args:
        token: One of all/24h/7d/30d/6m/1y; anything else is treated as "all"
        now: The single "now" captured for the current request

    Returns:
        Cutoff instant, or None when no filtering applies
    """
    parsed = token if isinstance(token, FilterToken) else parse_filter_token(token)

    if parsed in FIXED_WINDOWS:
        return now - FIXED_WINDOWS[parsed]
    if parsed is FilterToken.LAST_6_MONTHS:
        return subtract_months(now, 6)
    if parsed is FilterToken.LAST_YEAR:
        return subtract_months(now, 12)
    return None


def passes_cutoff(timestamp: datetime, cutoff: datetime | None) -> bool:
    """An entry is kept when there is no cutoff or it is at/after the cutoff."""
    return cutoff is None or timestamp >= cutoff
