"""Source adapters: one function per upstream layout.

Each adapter turns one source's raw payload into canonical ``Hearing``
records (not yet deduplicated or decorated).  Malformed rows are dropped,
never raised, and the kept/dropped tally is logged for diagnostics.
"""

from __future__ import annotations

import html
import json
import logging
import re
import uuid
from datetime import date, timedelta

from bs4 import BeautifulSoup, Tag

import config
from dates import resolve_date, to_iso_timestamp
from models import DEFAULT_STATUS, STATUS_SEPARATOR, Hearing, content_id
from utils import canonicalize_clock, cell_to_lines, normalize

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# House: JSON API rows
# ---------------------------------------------------------------------------

# "2025-08-12 13:30", "2025-08-12T13:30:00"
_NATIVE_TIMESTAMP_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ](\d{1,2}):(\d{2})(?::(\d{2}))?")
_FALSE_STRINGS = frozenset({"", "0", "false", "no", "n", "null", "none"})


def extract_house_rows(payload, strict: bool = False) -> list[dict]:
    """Pull the row list out of a House API payload.

    Accepts the live envelope ``{"data": {"rows": [...]}}``, a bare list of
    rows, or either one still encoded as a JSON string.  Anything else
    yields no rows, or raises ValueError when ``strict`` is set so the caller
    can tell a blocked payload from a week with no hearings.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            if strict:
                raise ValueError(f"House payload is not JSON: {e}") from e
            log.warning("House payload is not JSON: %s", e)
            return []

    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        data = payload.get("data")
        rows = data.get("rows") if isinstance(data, dict) else None
    else:
        rows = None

    if not isinstance(rows, list):
        if strict:
            raise ValueError("House payload has no data.rows list")
        log.warning("House payload has no data.rows list")
        return []
    return [row for row in rows if isinstance(row, dict)]


def _first(row: dict, *names: str):
    """First non-empty value among alternative field names."""
    for name in names:
        value = row.get(name)
        if value is not None and value != "":
            return value
    return ""


def _as_text(value) -> str:
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return value if isinstance(value, str) else ""


def _free_text(value) -> str:
    """Decode entities (and flatten any markup) in a free-text API field."""
    text = _as_text(value)
    if "<" in text:
        return "; ".join(cell_to_lines(text))
    return normalize(html.unescape(text))


def _flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _house_status(row: dict) -> str:
    bits = []
    if _flag(row.get("cancelled")):
        bits.append("Cancelled")
    resched = _free_text(row.get("resched"))
    if resched:
        bits.append(f"Rescheduled: {resched}")
    remarks = _free_text(row.get("remarks"))
    if remarks:
        bits.append(remarks)
    return STATUS_SEPARATOR.join(bits) or DEFAULT_STATUS


def _native_iso(value) -> str:
    m = _NATIVE_TIMESTAMP_RE.match(normalize(_as_text(value)))
    if not m:
        return ""
    day, hour, minutes, seconds = m.groups()
    if int(hour) > 23 or int(minutes) > 59:
        return ""
    return f"{day}T{int(hour):02d}:{minutes}:{seconds or '00'}"


def adapt_house_row(row: dict, fallback_year: int | None = None) -> Hearing | None:
    """Map one API row to a Hearing, or None when date or committee is missing.

    Rows without a time are kept: the API is authoritative even when the
    hearing time is still to be announced.
    """
    day = resolve_date(_as_text(_first(row, "date", "scheduleDate")), fallback_year)
    committee = _free_text(_first(row, "comm_name", "committee"))
    if not day or not committee:
        return None

    time = canonicalize_clock(_as_text(_first(row, "time", "scheduleTime")))
    native_id = _as_text(_first(row, "id", "record_id", "_id"))
    return Hearing(
        id=f"house-{native_id or uuid.uuid4().hex[:10]}",
        chamber=config.HOUSE,
        committee=committee,
        date=day,
        time=time,
        venue=_free_text(row.get("venue")),
        agenda=_free_text(_first(row, "agenda", "subject")),
        status=_house_status(row),
        notes="Onwards" if _flag(row.get("onwards")) else "",
        iso_date=_native_iso(row.get("datetime")) or to_iso_timestamp(day, time),
        source=config.HOUSE_SOURCE,
    )


def adapt_house_rows(rows: list[dict], fallback_year: int | None = None) -> list[Hearing]:
    """Adapt every House API row, dropping the ones that can't be placed."""
    records = []
    for row in rows:
        hearing = adapt_house_row(row, fallback_year) if isinstance(row, dict) else None
        if hearing is not None:
            records.append(hearing)
    log.info("House API: kept %d of %d rows (%d dropped)",
             len(records), len(rows), len(rows) - len(records))
    return records


# ---------------------------------------------------------------------------
# Senate: static weekly schedule (one table per day)
#   row 0: day label ("Tuesday, August 12")
#   row 1: column headers (Committee | Time & Venue | Agenda)
#   rows 2+: data rows
# ---------------------------------------------------------------------------

_NO_HEARING_RE = re.compile(r"\bno\s+(?:committee\s+)?(?:hearings?|meetings?)\b", re.IGNORECASE)
_AS_OF_RE = re.compile(r"\bas\s+of\b:?\s*(.{0,80})", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")
# A day this far before the banner date belongs to the next calendar year
_ROLLOVER = timedelta(days=180)


def _banner_date(soup: BeautifulSoup) -> date | None:
    """Date of the page's 'AS OF <Month D, YYYY>' banner, if it has one.

    Text inside the day tables is never the banner, and the words must be
    followed by a full date, so agenda text like "as of 2019" is ignored.
    """
    for s in soup.find_all(string=re.compile(r"\bas\s+of\b", re.IGNORECASE)):
        if s.find_parent("table", class_="grayborder") is not None:
            continue
        container = s.find_parent(["td", "th", "p", "div", "font"]) or s.parent
        m = _AS_OF_RE.search(normalize(container.get_text(" ")))
        year = _YEAR_RE.search(m.group(1)) if m else None
        if not year:
            continue
        day = resolve_date(m.group(1), int(year.group(1)))
        if day:
            return date.fromisoformat(day)
    return None


def _roll_forward(label: str, day: str, as_of: date) -> str:
    """Move a yearless day label into the next year when the page spans New Year."""
    if date.fromisoformat(day) >= as_of - _ROLLOVER:
        return day
    # Labels that carry their own year resolve the same either way
    return resolve_date(label, as_of.year + 1) or day


def _own_rows(table: Tag) -> list[Tag]:
    """<tr> elements of this table, excluding rows of nested tables."""
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def _day_blocks(soup: BeautifulSoup) -> list[Tag]:
    return soup.select("table.grayborder") or soup.find_all("table")


def _parse_senate_row(cells: list[Tag], day: str) -> Hearing | None:
    committee = normalize(cells[0].get_text(" "))
    time_venue = cell_to_lines(cells[1].decode_contents())
    time = canonicalize_clock(time_venue[0]) if time_venue else ""
    if not committee or not time:
        return None

    hearing = Hearing(
        chamber=config.SENATE,
        committee=committee,
        date=day,
        time=time,
        venue=" ".join(time_venue[1:]),
        agenda="; ".join(cell_to_lines(cells[2].decode_contents())),
        status=DEFAULT_STATUS,
        iso_date=to_iso_timestamp(day, time),
        source=config.SENATE_SOURCE,
    )
    hearing.id = content_id("senate", hearing)
    return hearing


def adapt_senate_html(page, fallback_year: int | None = None) -> list[Hearing]:
    """Parse the Senate weekly schedule page into Hearings.

    A row is kept only with a resolved day label, a time, and a committee.
    "No Committee Hearing/Meeting" placeholder rows are skipped.
    """
    if not isinstance(page, str) or not page.strip():
        return []
    soup = BeautifulSoup(page, "lxml")
    as_of = None
    if fallback_year is None:
        as_of = _banner_date(soup)
        fallback_year = as_of.year if as_of else None

    records = []
    dropped = 0
    for table in _day_blocks(soup):
        rows = _own_rows(table)
        if len(rows) < 3:
            continue
        label_cell = rows[0].find(["td", "th"])
        label = normalize(label_cell.get_text(" ")) if label_cell else ""
        day = resolve_date(label, fallback_year)
        if not day:
            log.debug("Skipping table with unresolvable day label %r", label[:60])
            continue
        if as_of is not None:
            day = _roll_forward(label, day, as_of)

        for tr in rows[2:]:
            cells = tr.find_all(["td", "th"], recursive=False)
            if len(cells) < 3:
                continue
            if _NO_HEARING_RE.search(normalize(cells[0].get_text(" "))):
                continue
            hearing = _parse_senate_row(cells, day)
            if hearing is None:
                dropped += 1
                continue
            records.append(hearing)

    log.info("Senate schedule: kept %d rows (%d dropped)", len(records), dropped)
    return records
