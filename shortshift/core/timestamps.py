"""Timestamp parsing and formatting shared by the intake form and the API."""

from datetime import UTC, datetime


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware datetime.

    Values without an offset are read as local wall-clock time. The result
    is always representable in UTC, so ``to_iso_utc`` cannot fail on it.

    Raises:
        ValueError: If the value is not a valid timestamp or falls outside
            the supported date range once converted to UTC
    """
    parsed = datetime.fromisoformat(value.strip())
    try:
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
        parsed.astimezone(UTC)
    except OverflowError as e:
        raise ValueError(f"Timestamp out of range: {value!r}") from e
    return parsed


def to_iso_utc(value: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with milliseconds, e.g. ``2024-05-01T16:30:00.000Z``."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
