from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

DEFAULT_OPENING_HOUR = 8
DEFAULT_CLOSING_HOUR = 18
SLOT_MINUTES = 30


class InvalidSlotError(ValueError):
    """Raised when a slot token is malformed or not bookable."""


@dataclass(frozen=True)
class TimeSlot:
    value: str  # "H:MM", 24h, hour not zero-padded
    label: str  # "h:MM AM/PM"


def _as_date(d: date | datetime) -> date:
    return d.date() if isinstance(d, datetime) else d


def format_token(minutes_from_midnight: int) -> str:
    hour, minute = divmod(minutes_from_midnight, 60)
    return f"{hour}:{minute:02d}"


def format_label(minutes_from_midnight: int) -> str:
    hour, minute = divmod(minutes_from_midnight, 60)
    suffix = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def _rounded_start(now: datetime, step_minutes: int) -> int:
    """Minutes from midnight of `now`, rounded up to the next slot boundary."""
    current = now.hour * 60 + now.minute
    remainder = current % step_minutes
    if remainder == 0:
        return current
    return current + step_minutes - remainder


def generate_slots(
    selected_date: date | datetime,
    now: datetime,
    opening_hour: int = DEFAULT_OPENING_HOUR,
    closing_hour: int = DEFAULT_CLOSING_HOUR,
    step_minutes: int = SLOT_MINUTES,
) -> list[TimeSlot]:
    """Bookable slots for selected_date, from opening to closing hour inclusive.

    For today the first slot is `now` rounded up to the next half hour
    (9:10 -> 9:30, 9:31 -> 10:00, 9:00 stays). Past days and days whose
    rounded start lies beyond closing yield an empty list. The horizon
    (how far ahead one may book) is the caller's concern.
    """
    day = _as_date(selected_date)
    today = now.date()
    if day < today:
        return []

    start = opening_hour * 60
    end = closing_hour * 60
    if day == today:
        start = max(start, _rounded_start(now, step_minutes))

    return [
        TimeSlot(value=format_token(m), label=format_label(m))
        for m in range(start, end + 1, step_minutes)
    ]


def parse_slot_token(token: str) -> time:
    hour_part, sep, minute_part = token.strip().partition(":")
    if not sep or not hour_part.isdigit() or len(minute_part) != 2 or not minute_part.isdigit():
        raise InvalidSlotError(f"Malformed slot token: {token!r}")
    hour, minute = int(hour_part), int(minute_part)
    if hour > 23 or minute > 59:
        raise InvalidSlotError(f"Malformed slot token: {token!r}")
    return time(hour, minute)


def combine_date_and_slot(selected_date: date | datetime, token: str) -> datetime:
    """Appointment timestamp for a chosen day and slot token."""
    return datetime.combine(_as_date(selected_date), parse_slot_token(token))


def slot_token_for(moment: datetime) -> str:
    return format_token(moment.hour * 60 + moment.minute)


def is_within_booking_horizon(selected_date: date | datetime, today: date, horizon_days: int) -> bool:
    day = _as_date(selected_date)
    return today <= day <= today + timedelta(days=horizon_days)
