from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable

from git_hours.config import DEFAULT_FIRST_COMMIT_ADDITION_MINUTES, DEFAULT_MAX_COMMIT_DIFF_MINUTES


def estimate_hours(
    dates: Iterable[datetime],
    max_commit_diff_minutes: float = DEFAULT_MAX_COMMIT_DIFF_MINUTES,
    first_commit_addition_minutes: float = DEFAULT_FIRST_COMMIT_ADDITION_MINUTES,
) -> int:
    """
    Estimate working hours from commit dates.

    Consecutive commits closer than `max_commit_diff_minutes` belong to the same
    coding session and contribute the time between them. A larger gap starts
    a new session; the work done before its first commit cannot be seen in git
    history, so `first_commit_addition_minutes` is added instead. Time before
    the very first commit is never counted.

    Args:
        dates: Commit dates of a single author, in any order
        max_commit_diff_minutes: Largest gap still counted as one session
        first_commit_addition_minutes: Estimate for a session's first commit

    Returns:
        Estimated hours, rounded half up
    """
    # Oldest commit first, newest last
    sorted_dates = sorted(dates)
    if len(sorted_dates) < 2:
        return 0

    total_hours = 0.0
    for previous, current in zip(sorted_dates, sorted_dates[1:]):
        diff_in_minutes = (current - previous).total_seconds() / 60
        if diff_in_minutes < max_commit_diff_minutes:
            total_hours += diff_in_minutes / 60
        else:
            total_hours += first_commit_addition_minutes / 60

    return int(math.floor(total_hours + 0.5))
