"""Due date normalization.

The Tasks API only keeps the date portion of ``due``, so every accepted input
is reduced to midnight UTC in RFC 3339 form (``YYYY-MM-DDT00:00:00.000Z``).

Inputs are matched against the shapes below in order and only the first
matching shape is tried:

1. ``YYYY-MM-DDTHH:MM:SS[.mmm]Z``
2. ``YYYY-MM-DD``
3. ``M/D/YYYY`` (US order)
4. ``D-D-YYYY``: day first when the first number is above 12, month first
   otherwise. ``01-02-2025`` is therefore always January 2nd, never
   February 1st.
5. ``YYYY/MM/DD``
6. anything else goes to ``dateutil.parser``
"""

import re
from datetime import datetime, timezone

from dateutil import parser as date_parser

from gtasks_mcp.exceptions import DueDateParseError

MIN_YEAR = 1970
MAX_YEAR = 2100

_RFC3339_UTC = re.compile(r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.\d{3})?Z", re.ASCII)
_ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
_US_SLASH = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})", re.ASCII)
_DASHED = re.compile(r"(\d{1,2})-(\d{1,2})-(\d{4})", re.ASCII)
_YEAR_FIRST_SLASH = re.compile(r"(\d{4})/(\d{2})/(\d{2})", re.ASCII)

# Differ in year, month and day so a field missing from the input shows up
# as a difference between the two parses.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


class _YearOutOfRange(Exception):
    def __init__(self, year: int):
        super().__init__(year)
        self.year = year


def _utc_date(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    # Year first: datetime() cannot represent year 0 at all.
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise _YearOutOfRange(year)
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


def _parse_free_form(text: str) -> datetime:
    first = date_parser.parse(text, default=_FILL_DEFAULTS[0])
    second = date_parser.parse(text, default=_FILL_DEFAULTS[1])
    if first.date() != second.date():
        raise ValueError(f"{text!r} does not name a full calendar date")
    if first.tzinfo is None:
        return first.replace(tzinfo=timezone.utc)
    return first.astimezone(timezone.utc)


def _parse_candidate(text: str) -> datetime:
    """Turn ``text`` into a UTC instant using the first shape it matches.

    Raises ValueError (or OverflowError) for impossible dates such as
    ``02/30/2025``; nothing is rolled over into the next month. A numeric
    shape with a year outside the accepted range raises _YearOutOfRange.
    """
    m = _RFC3339_UTC.fullmatch(text)
    if m:
        year, month, day, hour, minute, second = (int(g) for g in m.groups())
        return _utc_date(year, month, day, hour, minute, second)

    m = _ISO_DATE.fullmatch(text)
    if m:
        year, month, day = (int(g) for g in m.groups())
        return _utc_date(year, month, day)

    m = _US_SLASH.fullmatch(text)
    if m:
        month, day, year = (int(g) for g in m.groups())
        return _utc_date(year, month, day)

    m = _DASHED.fullmatch(text)
    if m:
        first, second, year = (int(g) for g in m.groups())
        if first > 12:
            return _utc_date(year, second, first)
        return _utc_date(year, first, second)

    m = _YEAR_FIRST_SLASH.fullmatch(text)
    if m:
        year, month, day = (int(g) for g in m.groups())
        return _utc_date(year, month, day)

    return _parse_free_form(text)


def _out_of_range(value: str, year: int) -> DueDateParseError:
    return DueDateParseError(
        value,
        "out_of_range",
        f'Invalid date year: {year} (from "{value}"). Year must be between {MIN_YEAR} and {MAX_YEAR}.',
    )


def normalize_due_date(value: str | None) -> str | None:
    """Normalize a user-supplied due date to ``YYYY-MM-DDT00:00:00.000Z``.

    Returns None for a missing or blank value. Raises DueDateParseError with
    ``reason="malformed"`` when the value is not a valid date and
    ``reason="out_of_range"`` when its year is outside 1970-2100.
    """
    if value is None or not value.strip():
        return None

    text = value.strip()
    try:
        instant = _parse_candidate(text)
    except _YearOutOfRange as e:
        raise _out_of_range(value, e.year) from e
    except (ValueError, OverflowError) as e:
        raise DueDateParseError(
            value,
            "malformed",
            f'Invalid date format: "{value}". Please use ISO format (YYYY-MM-DD) or RFC 3339 (YYYY-MM-DDTHH:MM:SSZ).',
        ) from e

    if not MIN_YEAR <= instant.year <= MAX_YEAR:
        raise _out_of_range(value, instant.year)

    return f"{instant.date().isoformat()}T00:00:00.000Z"
