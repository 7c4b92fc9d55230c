"""Date and time resolution for schedule labels.

Both chambers print dates as free text ("Tuesday, August 12",
"12-Aug-2025 • Tuesday", "Sept. 3rd (Continuation)").  Everything is
resolved to a plain YYYY-MM-DD calendar date with ``datetime.date`` so no
timezone arithmetic can shift the day.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime

from utils import normalize

log = logging.getLogger(__name__)

_MONTHS = {
    "january": 1, "jan": 1, "february": 2, "feb": 2, "march": 3, "mar": 3,
    "april": 4, "apr": 4, "may": 5, "june": 6, "jun": 6, "july": 7, "jul": 7,
    "august": 8, "aug": 8, "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10, "november": 11, "nov": 11, "december": 12, "dec": 12,
}

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIMESTAMP_YEAR_RE = re.compile(r"^(\d{4})-\d{2}-\d{2}")
_TRAILING_PAREN_RE = re.compile(r"\s*\([^)]*\)\s*$")
_ORDINAL_RE = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b", re.IGNORECASE)
_WEEKDAY_RE = re.compile(
    r"^(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday"
    r"|mon|tues|tue|wed|thurs|thur|thu|fri|sat|sun)\.?,?\s+",
    re.IGNORECASE,
)
# "12-Aug-2025 • Tuesday" (House weekly print headers)
_DAY_MON_YEAR_RE = re.compile(r"^(\d{1,2})-([A-Za-z]+)\.?-(\d{4})\b")
# "August 12", "Aug. 12, 2025", "Sept 3 2025"
_MONTH_DAY_RE = re.compile(r"^([A-Za-z]+)\.?\s+(\d{1,2})\b(?:\s*,?\s*(\d{4})\b)?")
# "10:00 AM", "1:30pm", "9 AM"
_CLOCK_RE = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*(AM|PM)?", re.IGNORECASE)

# Record fields that carry a full timestamp, in order of trust
_YEAR_HINT_FIELDS = ("isoDate", "firstSeenAt", "lastSeenAt", "capturedAt")


def _build_date(year: int, month_name: str, day: int) -> str:
    month = _MONTHS.get(month_name.lower().rstrip("."))
    if month is None:
        return ""
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return ""


def resolve_date(label, fallback_year: int | None = None) -> str:
    """Resolve a date label to YYYY-MM-DD, or '' when it can't be resolved.

    Labels without a year use ``fallback_year`` (current year when None).
    Never raises; an unresolvable label means the caller drops the record.
    """
    text = normalize(label)
    while True:
        stripped = _TRAILING_PAREN_RE.sub("", text)
        if stripped == text:
            break
        text = stripped
    text = _ORDINAL_RE.sub(r"\1", text)
    if not text:
        return ""

    if ISO_DATE_RE.match(text):
        return text

    m = _DAY_MON_YEAR_RE.match(text)
    if m:
        return _build_date(int(m.group(3)), m.group(2), int(m.group(1)))

    text = _WEEKDAY_RE.sub("", text)
    m = _MONTH_DAY_RE.match(text)
    if not m:
        log.debug("Unrecognized date label: %r", label)
        return ""

    if m.group(3):
        year = int(m.group(3))
    elif fallback_year is not None:
        year = int(fallback_year)
    else:
        year = datetime.now().year
    return _build_date(year, m.group(1), int(m.group(2)))


def infer_fallback_year(record: Mapping) -> int | None:
    """Year hint for a stored record whose date label has no year.

    Looks at the record's own timestamps (isoDate, then first/last seen,
    then capture time) so a December hearing read back in January keeps
    its original year.
    """
    for field_name in _YEAR_HINT_FIELDS:
        value = record.get(field_name)
        if not isinstance(value, str):
            continue
        m = _TIMESTAMP_YEAR_RE.match(value.strip())
        if m:
            return int(m.group(1))
    return None


def to_iso_timestamp(day, time) -> str:
    """Combine a YYYY-MM-DD date and a 12-hour clock into YYYY-MM-DDTHH:MM:SS.

    Empty or unrecognizable time means midnight.  Returns '' when ``day``
    is not an ISO date.
    """
    day = normalize(day)
    if not ISO_DATE_RE.match(day):
        return ""
    clock = normalize(time)
    if not clock:
        return f"{day}T00:00:00"

    m = _CLOCK_RE.search(clock)
    if not m:
        return f"{day}T00:00:00"
    hour = int(m.group(1))
    minutes = int(m.group(2)) if m.group(2) else 0
    meridiem = m.group(3).upper() if m.group(3) else None

    if meridiem == "PM" and hour < 12:
        hour += 12
    if meridiem == "AM" and hour == 12:
        hour = 0
    if hour > 23 or minutes > 59:
        log.debug("Out-of-range clock %r on %s, using midnight", time, day)
        return f"{day}T00:00:00"
    return f"{day}T{hour:02d}:{minutes:02d}:00"
