from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from logdash.config.settings import get_settings

TIME_WINDOWS = {
    "1h": timedelta(hours=1),
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}


def log_timezone() -> ZoneInfo:
    return ZoneInfo(get_settings().log_timezone)


def today() -> date:
    return datetime.now(log_timezone()).date()


def resolve_range(
    from_date: Optional[date], to_date: Optional[date]
) -> tuple[date, date]:
    """Default both ends to today and validate the span."""
    start = from_date or today()
    end = to_date or today()

    if start > end:
        raise ValueError(f"from_date {start} is after to_date {end}")

    max_days = get_settings().max_range_days
    if (end - start).days + 1 > max_days:
        raise ValueError(f"Date range exceeds {max_days} days")

    return start, end


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def day_path(root: str, day: date) -> str:
    return f"{root}/{day.year}/{day.month:02d}/{day.day:02d}"


def parse_log_datetime(
    day: date, value: Optional[str] = None, clock: Optional[str] = None
) -> datetime:
    """Resolve when a log entry happened.

    ``value`` is a full ISO timestamp; naive values are read in the log
    timezone. Without it, ``clock`` ("HH:MM:SS") is combined with the
    partition day. Unparseable input falls back to midnight of ``day``.
    """
    tz = log_timezone()

    if value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=tz)

    if clock:
        try:
            return datetime.combine(day, time.fromisoformat(clock), tzinfo=tz)
        except ValueError:
            pass

    return datetime.combine(day, time.min, tzinfo=tz)


def window_cutoff(window: str, now: Optional[datetime] = None) -> datetime:
    if window not in TIME_WINDOWS:
        raise ValueError(
            f"Unknown time range {window!r}, expected one of {', '.join(TIME_WINDOWS)}"
        )
    now = now or datetime.now(timezone.utc)
    return now - TIME_WINDOWS[window]


def local_day(moment: datetime) -> str:
    return moment.astimezone(log_timezone()).date().isoformat()


def local_hour(moment: datetime) -> int:
    return moment.astimezone(log_timezone()).hour


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def to_epoch(value: Optional[str]) -> float:
    """Seconds since the epoch for an ISO string, 0 when missing or unparseable."""
    if not value:
        return 0.0
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if not parsed.tzinfo:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()
