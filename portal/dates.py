from datetime import date, datetime, time, timedelta, timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

# Smallest step both stores can represent (MongoDB keeps milliseconds)
TICK = timedelta(milliseconds=1)

EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


def now():
    return timezone.now()


def as_datetime(value):
    """Coerce a stored or submitted date to an aware datetime, or ``None``."""
    if value is None or value == '':
        return None
    if isinstance(value, str):
        parsed = parse_datetime(value)
        if parsed is None:
            parsed_date = parse_date(value)
            if parsed_date is None:
                raise ValueError(f"Invalid date: {value}")
            parsed = datetime.combine(parsed_date, time.min)
        value = parsed
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if timezone.is_naive(value):
        value = timezone.make_aware(value, dt_timezone.utc)
    return value


def later_than(previous):
    """Current time, nudged forward so it is strictly after ``previous``."""
    current = now()
    previous = as_datetime(previous)
    if previous is not None and current <= previous:
        current = previous + TICK
    return current


def isoformat(value):
    value = as_datetime(value)
    return value.isoformat() if value else None
