from datetime import datetime, timezone
from typing import Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Return a timezone-aware UTC datetime.

    Some backends (SQLite) hand back naive datetimes for timezone-aware
    columns; those are assumed to already be UTC.

    Args:
        value: Datetime to normalise, may be None

    Returns:
        The aware datetime, or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
