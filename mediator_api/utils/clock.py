"""UTC wall clock for stored timestamps."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time without tzinfo; all timestamp columns store naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
