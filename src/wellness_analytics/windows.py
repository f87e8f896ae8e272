"""
Relative time-window resolution.

Turns range tokens such as ``"7d"``, ``"3m"`` or ``"1y"`` into an absolute
lower-bound timestamp. Malformed tokens never raise; they fall back to a
default number of days chosen by the caller (7 for self views, 30 for
supporter views).
"""

import calendar
import logging
import re
from datetime import datetime, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

SELF_DEFAULT_DAYS = 7
SUPPORTER_DEFAULT_DAYS = 30

_TOKEN_PATTERN = re.compile(r"^(?P<count>\d+)(?P<unit>[dmy])$")


def _shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` back by whole calendar months, clamping the day."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_window(token: Optional[str]) -> Optional[tuple]:
    """
    Split a range token into ``(count, unit)``.

    Returns None when the token has no recognised unit suffix or the count
    is not a positive integer.
    """
    if not isinstance(token, str):
        return None
    match = _TOKEN_PATTERN.match(token.strip().lower())
    if not match:
        return None
    try:
        count = int(match.group("count"))
    except ValueError:
        # Digit strings past the interpreter's int conversion limit.
        return None
    if count <= 0:
        return None
    return count, match.group("unit")


def resolve_window(token: Optional[str], now: datetime, default_days: int = SUPPORTER_DEFAULT_DAYS) -> datetime:
    """Resolve a range token against ``now`` into the window's start timestamp."""
    parsed = parse_window(token)
    if parsed is None:
        logger.debug(f"[WINDOW] Unrecognised range {token!r}, using {default_days}d")
        return now - timedelta(days=default_days)

    count, unit = parsed
    try:
        if unit == "d":
            return now - timedelta(days=count)
        if unit == "m":
            return _shift_months(now, count)
        return _shift_months(now, count * 12)
    except (OverflowError, ValueError):
        # Window reaches past the earliest representable date.
        return datetime.min.replace(tzinfo=now.tzinfo)
