"""Publish-time resolution for the intake form."""

import logging

from shortshift.core.timestamps import parse_timestamp, to_iso_utc

logger = logging.getLogger(__name__)

DEFAULT_PUBLISH_TIME = "09:00"


def resolve_publish_at(date: str, time: str = "") -> str | None:
    """Combine a schedule date and time into a publish timestamp.

    An empty date means the Short is not scheduled. An unparseable date is
    treated the same way rather than as an error.

    Args:
        date: Calendar date, ``YYYY-MM-DD``
        time: Local wall-clock time, ``HH:MM`` (defaults to 09:00)

    Returns:
        UTC ISO-8601 timestamp, or None when unscheduled
    """
    if not date:
        return None
    try:
        publish_at = parse_timestamp(f"{date}T{time or DEFAULT_PUBLISH_TIME}:00")
    except ValueError:
        logger.debug("Ignoring invalid schedule %r %r", date, time)
        return None
    return to_iso_utc(publish_at)
