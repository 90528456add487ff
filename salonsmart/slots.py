from datetime import date, datetime, timedelta
from typing import List

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def _half_hour_grid(first: str = "09:00", last: str = "17:30") -> List[str]:
    current = datetime.strptime(first, TIME_FORMAT)
    end = datetime.strptime(last, TIME_FORMAT)
    slots = []
    while current <= end:
        slots.append(current.strftime(TIME_FORMAT))
        current += timedelta(minutes=30)
    return slots


TIME_SLOTS = _half_hour_grid()


def is_bookable_date(day: date, today: date) -> bool:
    """Past dates and Sundays cannot be booked."""
    return day >= today and day.weekday() != 6


def format_date(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()
