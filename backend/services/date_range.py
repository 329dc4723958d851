"""Resolution of `startDate`/`endDate` query strings into UTC boundaries."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timezone


logger = logging.getLogger(__name__)

_END_OF_DAY = time(23, 59, 59)
_CALENDAR_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def _parse_calendar_date(value: str) -> date:
    if not _CALENDAR_DATE.fullmatch(value):
        raise ValueError("date must use the YYYY-MM-DD format")
    return date.fromisoformat(value)


def parse_boundary(value: str | None, *, is_start: bool) -> datetime | None:
    """Return the UTC instant for a date boundary, or None when no boundary applies.

    Full timestamps (containing `T`) must carry an offset or `Z`. Plain
    `YYYY-MM-DD` dates resolve to midnight for a start boundary and to
    23:59:59 for an end boundary, so an end date includes the whole day.
    Malformed values, and timestamps whose UTC instant falls outside the
    supported datetime range, are logged and ignored.
    """

    if value is None or not value.strip():
        return None

    try:
        if "T" in value:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                raise ValueError("timestamp has no UTC offset")
            return parsed.astimezone(timezone.utc)

        day = _parse_calendar_date(value)
    except (ValueError, OverflowError) as exc:
        logger.warning("invalid_date_boundary value=%s error=%s", value, exc)
        return None

    boundary_time = time.min if is_start else _END_OF_DAY
    return datetime.combine(day, boundary_time, tzinfo=timezone.utc)


def check_date_order(start_date: str | None, end_date: str | None) -> None:
    """Reject a range whose raw start string sorts after its raw end string.

    The comparison is lexicographic on the inputs, before any parsing.
    """

    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValueError("Start date must be before or equal to end date")
