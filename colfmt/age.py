"""
renders timestamps as compact elapsed-time labels: 42s, 17m, 5h, 12d, 3M, or the year for anything older
"""

import logging
import re
from datetime import datetime, timezone

from .column_spec import ColumnType, SpecMapping

log = logging.getLogger(__name__)

# ——— Configuration ——————————————————————————————
TIME_LAYOUTS = [
    '%a %b %d %H:%M:%S %Y',         # ANSI C:      Mon Jan  2 15:04:05 2006
    '%a, %d %b %Y %H:%M:%S %Z',     # RFC 1123:    Mon, 02 Jan 2006 15:04:05 MST
    '%a, %d %b %Y %H:%M:%S %z',     # RFC 1123Z:   Mon, 02 Jan 2006 15:04:05 -0700
    '%Y-%m-%dT%H:%M:%S%z',          # RFC 3339:    2006-01-02T15:04:05Z07:00
    '%Y-%m-%dT%H:%M:%S.%f%z',       # RFC 3339 with fractional seconds
    '%d %b %y %H:%M %Z',            # RFC 822:     02 Jan 06 15:04 MST
    '%d %b %y %H:%M %z',            # RFC 822Z:    02 Jan 06 15:04 -0700
    '%A, %d-%b-%y %H:%M:%S %Z',     # RFC 850:     Monday, 02-Jan-06 15:04:05 MST
    '%a %b %d %H:%M:%S %z %Y',      # Ruby:        Mon Jan 02 15:04:05 -0700 2006
    '%a %b %d %H:%M:%S %Z %Y',      # Unix date:   Mon Jan  2 15:04:05 MST 2006
]

# strptime only knows UTC, GMT and the local zone names; other abbreviations are read as UTC
ZONE_ABBREVIATION = re.compile(r'\b[A-Z]{3,5}\b')
# %f accepts at most microseconds
EXCESS_FRACTION = re.compile(r'(\.[0-9]{6})[0-9]+')

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
MONTH = 30 * DAY


class AgeParseError(ValueError):
    pass


def parse_timestamp(text: str) -> datetime:
    text = EXCESS_FRACTION.sub(r'\1', text.strip())
    zoned = ZONE_ABBREVIATION.sub('UTC', text)
    for layout in TIME_LAYOUTS:
        try:
            t = datetime.strptime(zoned if '%Z' in layout else text, layout)
        except ValueError:
            continue
        if t.tzinfo is None:
            t = t.replace(tzinfo=timezone.utc)
        return t
    raise AgeParseError(f"can't parse as a time: {text!r}")


def render_age(text: str, now: datetime | None = None) -> str:
    t = parse_timestamp(text)
    now = now or datetime.now(timezone.utc)
    seconds = (now - t).total_seconds()
    # int() truncates toward zero, so timestamps in the near future read as negative ages
    if seconds < 90:
        return f"{int(seconds)}s"
    if seconds < 90 * MINUTE:
        return f"{int(seconds / MINUTE)}m"
    if seconds < DAY:
        return f"{int(seconds / HOUR)}h"
    if seconds < MONTH:
        return f"{int(seconds / DAY)}d"
    if seconds < 12 * MONTH:
        return f"{int(seconds / MONTH)}M"
    return str(t.year)


def render_ages(rows: list[list[str]], specs: SpecMapping, now: datetime | None = None) -> None:
    """ rewrite every age column in place. Unparseable fields are left alone with a warning """
    age_columns = sorted(i for i, spec in specs.items() if spec.type == ColumnType.AGE)
    if not age_columns:
        return
    now = now or datetime.now(timezone.utc)
    for row in rows:
        for i in age_columns:
            if i >= len(row):
                continue
            try:
                row[i] = render_age(row[i], now)
            except AgeParseError:
                log.warning(f"Unexpected date format: {row[i]!r}")
