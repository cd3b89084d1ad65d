from datetime import datetime, date, time, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def from_client(value: datetime) -> datetime:
    """Client timestamps without an offset are read in the server's local zone."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc)


def from_db(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything we store is UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """[day 00:00, day+1 00:00) in the server's local zone, as UTC instants."""
    start = datetime.combine(day, time.min).astimezone()
    end = datetime.combine(day + timedelta(days=1), time.min).astimezone()
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def isoformat(value: datetime | None) -> str | None:
    value = from_db(value)
    return value.isoformat() if value else None
