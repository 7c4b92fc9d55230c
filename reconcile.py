"""Dedup within one scrape and merge new scrapes into the persisted history.

The history merge is append-mostly: a hearing that drops off the live page
stays in history with its last-known fields.  Only a later record with the
same dedup key changes it, field by field.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from datetime import datetime, timezone

from models import SEEN_FIELDS, Hearing

log = logging.getLogger(__name__)


def dedupe(records: list[Hearing]) -> list[Hearing]:
    """Keep the first record for each dedup key, preserving input order."""
    seen: set[str] = set()
    out = []
    for record in records:
        key = record.key
        if key in seen:
            continue
        seen.add(key)
        out.append(record)
    if len(out) != len(records):
        log.debug("Dedup dropped %d duplicate record(s)", len(records) - len(out))
    return out


def _fill_empty(primary: Hearing, fallback: Hearing) -> Hearing:
    """Take ``primary``'s fields, falling back to ``fallback`` where primary is empty."""
    updates = {}
    for f in fields(primary):
        if f.name in SEEN_FIELDS:
            continue
        if not getattr(primary, f.name) and getattr(fallback, f.name):
            updates[f.name] = getattr(fallback, f.name)
    return replace(primary, **updates) if updates else replace(primary)


def _earliest(a: str, b: str) -> str:
    return min(v for v in (a, b) if v) if (a or b) else ""


def _latest(a: str, b: str) -> str:
    return max(v for v in (a, b) if v) if (a or b) else ""


def _ingest(merged: dict[str, Hearing], record: Hearing, first_seen: str, last_seen: str) -> None:
    key = record.key
    existing = merged.get(key)
    if existing is None:
        merged[key] = replace(record, first_seen_at=first_seen, last_seen_at=last_seen)
        return
    combined = _fill_empty(record, existing)
    combined.first_seen_at = _earliest(existing.first_seen_at, first_seen)
    combined.last_seen_at = _latest(existing.last_seen_at, last_seen)
    merged[key] = combined


def merge_with_history(
    current: list[Hearing],
    previous: list[Hearing] | None,
    now: str | None = None,
    default_seen_at: str | None = None,
) -> list[Hearing]:
    """Union the current scrape with the stored history, one record per key.

    History is ingested first, keeping each entry's own first/last-seen
    stamps (``default_seen_at`` stands in for missing ones).  The current
    scrape is then ingested as seen at ``now``: its non-empty fields win,
    empty ones keep the stored value, firstSeenAt takes the earlier stamp
    and lastSeenAt the later.  Keys only in history pass through untouched.

    Output order is unspecified; callers sort.
    """
    now = now or datetime.now(timezone.utc).isoformat()
    default_seen_at = default_seen_at or now

    merged: dict[str, Hearing] = {}
    for record in previous or []:
        _ingest(
            merged, record,
            record.first_seen_at or default_seen_at,
            record.last_seen_at or record.first_seen_at or default_seen_at,
        )
    carried = len(merged)
    for record in current:
        _ingest(merged, record, now, now)

    log.info("History merge: %d stored + %d scraped -> %d entries",
             carried, len(current), len(merged))
    return list(merged.values())


def history_stats(records: list[Hearing]) -> dict:
    """Entry count and the first/last-seen range across a history set."""
    first = [r.first_seen_at for r in records if r.first_seen_at]
    last = [r.last_seen_at for r in records if r.last_seen_at]
    return {
        "entries": len(records),
        "firstSeenAt": {"min": min(first) if first else None,
                        "max": max(first) if first else None},
        "lastSeenAt": {"min": min(last) if last else None,
                       "max": max(last) if last else None},
    }
