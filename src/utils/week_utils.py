#!/usr/bin/env python3
"""
Report cycle helpers.

A report cycle is one Monday-to-Sunday week, identified as 'current',
'week-N' (N weeks before the current one) or 'YYYY-Www' (ISO week).
"""

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

_WEEKS_BACK = re.compile(r'^week-(\d+)$')
_ISO_WEEK = re.compile(r'^(\d{4})-W(\d{1,2})$')

_RELATIVE_LABELS = {
    'current': 'This Week',
    'week-0': 'This Week',
    'week-1': 'Last Week',
    'week-2': '2 Weeks Ago',
    'week-3': '3 Weeks Ago',
}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a stored ISO timestamp or date into a naive datetime.

    Aware timestamps are converted to UTC before the tzinfo is dropped so
    they compare with naive week boundaries. Returns None when unparsable.
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _week_bounds(monday: date) -> Tuple[datetime, datetime]:
    start = datetime.combine(monday, time.min)
    end = datetime.combine(monday + timedelta(days=6), time.max)
    return start, end


def get_week_date_range(week_id: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Start and end of a report cycle.

    Args:
        week_id: 'current', 'week-N' or 'YYYY-Www'
        now: Reference time for relative ids; defaults to now

    Returns:
        (Monday 00:00:00, Sunday 23:59:59.999999)
    """
    now = now or datetime.now()
    if week_id == 'current':
        today = now.date()
        return _week_bounds(today - timedelta(days=today.weekday()))

    match = _WEEKS_BACK.match(week_id)
    if match:
        target = now.date() - timedelta(weeks=int(match.group(1)))
        return _week_bounds(target - timedelta(days=target.weekday()))

    match = _ISO_WEEK.match(week_id)
    if match:
        monday = date.fromisocalendar(int(match.group(1)), int(match.group(2)), 1)
        return _week_bounds(monday)

    raise ValueError(f"Unrecognized week id: {week_id}")


def get_week_label(week_id: str) -> str:
    """Human-readable label for a report cycle."""
    if week_id in _RELATIVE_LABELS:
        return _RELATIVE_LABELS[week_id]
    match = _ISO_WEEK.match(week_id)
    if match:
        return f"Week {int(match.group(2)):02d}, {match.group(1)}"
    return week_id


def get_current_week_id(now: Optional[datetime] = None) -> str:
    """ISO week id of `now`, e.g. '2025-W07'."""
    year, week, _ = (now or datetime.now()).isocalendar()
    return f"{year}-W{week:02d}"


def in_week(timestamp: Optional[str], week_range: Tuple[datetime, datetime]) -> bool:
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return False
    start, end = week_range
    return start <= parsed <= end
