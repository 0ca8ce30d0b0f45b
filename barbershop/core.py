# barbershop/core.py

from datetime import date, datetime, time, timedelta
from typing import List

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    # half-open intervals: touching ends do not overlap
    return a_start < b_end and b_start < a_end


def parse_hhmm(value: str) -> int:
    """Minutes since midnight for a zero-padded "HH:MM" string."""
    hours, sep, minutes = value.partition(":")
    if not sep or len(hours) != 2 or len(minutes) != 2 or not (hours + minutes).isdigit():
        raise ValueError(f"Invalid time format (HH:MM): {value!r}")
    h, m = int(hours), int(minutes)
    if h > 23 or m > 59:
        raise ValueError(f"Invalid time format (HH:MM): {value!r}")
    return h * 60 + m


def format_hhmm(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def add_minutes(start_time: str, minutes: int) -> str:
    # no day rollover: 23:50 + 20 -> "24:10"
    return format_hhmm(parse_hhmm(start_time) + minutes)


def to_time(value: str) -> time:
    total = parse_hhmm(value)
    return time(total // 60, total % 60)


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def start_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def combine(day: date, hhmm: str) -> datetime:
    return datetime.combine(day, to_time(hhmm))


def labels_between(start_time: str, end_time: str, step: int) -> List[str]:
    """Labels from start to end (inclusive) every `step` minutes, plus the exact end."""
    start, end = parse_hhmm(start_time), parse_hhmm(end_time)
    labels = [format_hhmm(m) for m in range(start, end + 1, step)]
    if end_time not in labels:
        labels.append(end_time)
    return labels
