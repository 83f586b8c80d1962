from datetime import datetime, timezone


def hhmmss_to_seconds(hhmmss: str) -> int:
    """
    Convert 'HH:MM:SS' -> total seconds (int).
    Example: '00:45:32' -> 2732
    """
    parts = hhmmss.split(":")
    if len(parts) != 3:
        raise ValueError("Duration must be in HH:MM:SS format")

    hours, minutes, seconds = map(int, parts)
    return hours * 3600 + minutes * 60 + seconds


def to_local_datetime(dt: datetime, tz_name: str | None = None) -> datetime:
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo
        return dt.astimezone(ZoneInfo(tz_name))
    return dt.astimezone()


def to_naive_local(dt: datetime | None, tz_name: str | None = None) -> datetime | None:
    """Local wall-clock time without tzinfo, as stored on activity records."""
    if dt is None:
        return None
    return to_local_datetime(dt, tz_name).replace(tzinfo=None)


def epoch_seconds(dt: datetime) -> float:
    """POSIX timestamp of `dt`; naive values are read as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()
