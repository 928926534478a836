from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def now_iso() -> str:
    return to_iso(utc_now())


def parse_iso(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def iso_after(previous: str | None) -> str:
    """Current time, nudged forward so it sorts strictly after ``previous``."""
    now = utc_now()
    if previous:
        try:
            prev = parse_iso(previous)
        except ValueError:
            return to_iso(now)
        if now <= prev:
            now = prev + timedelta(microseconds=1)
    return to_iso(now)
