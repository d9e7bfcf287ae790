from __future__ import annotations

import re

from app.core.exceptions import ValidationError

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
MINUTES_PER_DAY = 24 * 60

WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
WORKWEEK: tuple[str, ...] = WEEKDAYS[:5]


def parse_time_to_minutes(value: str) -> int:
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ValidationError(
            "Time must be in HH:MM 24-hour format",
            details={"value": value},
        )
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total_minutes: int) -> str:
    if total_minutes < 0 or total_minutes >= MINUTES_PER_DAY:
        raise ValidationError(
            "Time is outside a single day",
            details={"minutes": total_minutes},
        )
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def add_minutes(value: str, minutes: int) -> str:
    """Shift an ``HH:MM`` value forward without rolling past midnight."""
    if minutes < 0:
        raise ValidationError("Cannot add a negative number of minutes", details={"minutes": minutes})
    total = parse_time_to_minutes(value) + minutes
    if total >= MINUTES_PER_DAY:
        raise ValidationError(
            f"Adding {minutes} minutes to {value} crosses midnight",
            details={"time": value, "minutes": minutes},
        )
    return format_minutes(total)
