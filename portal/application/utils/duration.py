from __future__ import annotations

import math
from datetime import date, datetime, time

SECONDS_PER_DAY = 24 * 60 * 60


def days_between(start: date | datetime, end: date | datetime, clamp: bool = False) -> int:
    """
    Whole days from start to end, rounded up.

    Negative spans are kept unless `clamp` is set, so extension checks can
    reject end dates that do not move forward.
    """
    days = math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)
    if clamp:
        return max(days, 0)
    return days


def is_forward_extension(
    current_end_date: date,
    current_end_time: time,
    new_end_date: date,
    new_end_time: time,
) -> bool:
    if new_end_date > current_end_date:
        return True
    return new_end_date == current_end_date and new_end_time > current_end_time


def additional_days(original_days: int, new_days: int) -> int:
    return new_days - original_days


def is_valid_range(start_date: date, start_time: time, end_date: date, end_time: time) -> bool:
    if end_date > start_date:
        return True
    return end_date == start_date and end_time > start_time
