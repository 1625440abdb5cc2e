"""``Retry-After`` header parsing.

A ``Retry-After`` value is either a non-negative integer number of seconds
or an absolute HTTP date.  Three historical date encodings are accepted,
tried in this order::

    Sun, 06 Nov 1994 08:49:37 GMT    ; RFC 1123
    Sunday, 06-Nov-94 08:49:37 GMT   ; RFC 850
    Sun Nov  6 08:49:37 1994         ; ANSI C asctime()

Day and month names are matched against fixed English tables, so parsing
does not depend on the process ``LC_TIME`` locale.

Parsing never raises.  The result is either a :class:`DelayHint` or an
:class:`UnparsableHint`, so a zero-second delay can never be mistaken for a
value that could not be read.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

import httpx

from retryafter.models import DelayHint, HintSource, ParseOutcome, UnparsableHint

RETRY_AFTER = "Retry-After"

_DAY_ABBRS = "Mon|Tue|Wed|Thu|Fri|Sat|Sun"
_DAY_NAMES = "Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday"
_MONTHS: tuple[str, ...] = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)
_MONTH_RE = "|".join(_MONTHS)
_TIME_RE = r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"

_HTTP_DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # RFC 1123
    re.compile(
        rf"(?:{_DAY_ABBRS}), (?P<day>\d{{2}}) (?P<month>{_MONTH_RE}) "
        rf"(?P<year>\d{{4}}) {_TIME_RE} GMT",
        re.IGNORECASE,
    ),
    # RFC 850
    re.compile(
        rf"(?:{_DAY_NAMES}), (?P<day>\d{{2}})-(?P<month>{_MONTH_RE})-"
        rf"(?P<year>\d{{2}}) {_TIME_RE} GMT",
        re.IGNORECASE,
    ),
    # asctime
    re.compile(
        rf"(?:{_DAY_ABBRS}) (?P<month>{_MONTH_RE})\s+(?P<day>\d{{1,2}}) "
        rf"{_TIME_RE} (?P<year>\d{{4}})",
        re.IGNORECASE,
    ),
)


def header_value(response: httpx.Response) -> str | None:
    """Return the last ``Retry-After`` value on *response*, or ``None``."""
    values = response.headers.get_list(RETRY_AFTER)
    if not values:
        return None
    return values[-1]


def _full_year(year: str) -> int:
    value = int(year)
    if len(year) == 2:
        # Same pivot as strptime's %y: 69-99 -> 1900s, 00-68 -> 2000s.
        value += 1900 if value >= 69 else 2000
    return value


def parse_http_date(value: str) -> datetime | None:
    """Parse *value* as an HTTP date, returning an aware UTC datetime.

    Returns ``None`` when none of the three accepted formats match, or when
    the fields do not form a real calendar date.
    """
    for pattern in _HTTP_DATE_PATTERNS:
        match = pattern.fullmatch(value)
        if match is None:
            continue
        try:
            return datetime(
                _full_year(match["year"]),
                _MONTHS.index(match["month"].lower()) + 1,
                int(match["day"]),
                int(match["hour"]),
                int(match["minute"]),
                int(match["second"]),
                tzinfo=timezone.utc,
            )
        except ValueError:
            continue
    return None


def parse_retry_after(value: str, now: datetime | None = None) -> ParseOutcome:
    """Turn a raw ``Retry-After`` value into a delay.

    Parameters
    ----------
    value:
        The header value exactly as received.
    now:
        Reference time for HTTP-date values.  Defaults to the current UTC
        time; a naive datetime is taken to be UTC.

    Returns
    -------
    DelayHint | UnparsableHint
        The delay in seconds (never negative), or the unparsable raw value.
        Integers too large for a float come back as ``inf``.
    """
    text = value.strip()

    if text.isascii() and text.isdigit():
        return DelayHint(seconds=float(text), source=HintSource.SECONDS)

    when = parse_http_date(text)
    if when is None:
        return UnparsableHint(raw=value)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    delay = (when - now).total_seconds()
    return DelayHint(seconds=max(delay, 0.0), source=HintSource.HTTP_DATE)
