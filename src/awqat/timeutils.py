from __future__ import annotations

from datetime import date, datetime, time


def parse_hhmm(value: str) -> time:
    value = value.strip()
    parts: list[str]
    if ":" in value:
        parts = value.split(":", 1)
    elif "." in value:
        parts = value.split(".", 1)
    else:
        raise ValueError(f"Unsupported time format: {value}")
    hour = int(parts[0])
    minute = int(parts[1])
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid time value: {value}")
    return time(hour=hour, minute=minute)


def sanitize_time(value: str) -> str:
    """Strip timezone suffixes such as ``"05:00 (EET)"`` or ``"05:00+03"``."""
    value = value.strip()
    if " " in value:
        value = value.split(" ", 1)[0]
    if "+" in value:
        value = value.split("+", 1)[0]
    if "-" in value and value.count(":") == 1 and value.split("-", 1)[1].isdigit():
        value = value.split("-", 1)[0]
    return value


def format_time(time24: str | None) -> str:
    """Render a 24-hour ``HH:MM`` string as ``h:MM AM/PM``."""
    if not time24:
        return ""
    hours, minutes = time24.split(":", 1)
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = 12 if hour % 12 == 0 else hour % 12
    return f"{display_hour}:{minutes} {suffix}"


def format_day(day: date) -> str:
    return day.strftime("%d-%m-%Y")


def at_clock(day: date, value: str) -> datetime:
    """Combine a calendar day with an ``HH:MM`` clock time."""
    return datetime.combine(day, parse_hhmm(value))
