from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(dt: datetime) -> str:
    """Render a datetime the way browsers print `Date.toISOString()`."""
    if dt.tzinfo is None:
        # pymongo hands back naive datetimes that are already UTC
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def timestamp() -> str:
    return isoformat(utcnow())
