from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union


ALWAYS = 'always'
DATE_FORMAT = '%Y-%m-%d'
DATE_KEYWORDS = ('always', 'today', 'yesterday', 'thisweek', 'lastweek')


class DateParseError(ValueError):
    pass


def parse_input_date(value: Optional[str], today: Optional[date] = None) -> Union[date, str]:
    """Turn a --since/--until value into a date, or the ALWAYS sentinel.

    Keywords are resolved against `today` (the local current date when not
    given). `thisweek` starts on Sunday while `lastweek` starts on Monday.
    """
    if not value or value == ALWAYS:
        return ALWAYS

    today = today or date.today()
    if value == 'today':
        return today
    if value == 'yesterday':
        return today - timedelta(days=1)
    if value == 'thisweek':
        return today - timedelta(days=(today.weekday() + 1) % 7)
    if value == 'lastweek':
        last_week = today - timedelta(weeks=1)
        return last_week - timedelta(days=last_week.weekday())

    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise DateParseError(
            f"Invalid date: {value!r} (expected one of {'|'.join(DATE_KEYWORDS)} or YYYY-MM-DD)"
        ) from None


def format_git_date(value: Union[date, datetime]) -> str:
    return value.strftime(DATE_FORMAT)
