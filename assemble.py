"""Decorate, sort, and bundle canonical records for the calendar front end."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

import config
from dates import to_iso_timestamp
from models import Hearing
from reconcile import dedupe, history_stats
from utils import normalize

log = logging.getLogger(__name__)


@dataclass
class Assembly:
    house: list[Hearing]
    senate: list[Hearing]
    combined: list[Hearing]
    metadata: dict = field(default_factory=dict)


def search_text(record: Hearing) -> str:
    parts = (record.chamber, record.committee, record.venue,
             record.agenda, record.status, record.notes)
    return " ".join(p for p in map(normalize, parts) if p).lower()


def decorate(record: Hearing) -> Hearing:
    """Fill isoDate when missing and recompute searchText.  Idempotent."""
    return replace(
        record,
        iso_date=record.iso_date or to_iso_timestamp(record.date, record.time),
        search_text=search_text(record),
    )


def _sort_key(record: Hearing) -> tuple:
    # Records without a timestamp go last; ties break on committee name
    if record.iso_date:
        return (0, record.iso_date, record.committee)
    return (1, "", record.committee)


def sort_records(records: list[Hearing]) -> list[Hearing]:
    return sorted(records, key=_sort_key)


def _prepare(records: list[Hearing]) -> list[Hearing]:
    return sort_records(dedupe([decorate(r) for r in records]))


def assemble(
    house: list[Hearing],
    senate: list[Hearing],
    history: list[Hearing] | None = None,
    generated_at: str | None = None,
    live_counts: dict[str, int] | None = None,
) -> Assembly:
    """Build per-chamber lists, the combined list, and run metadata.

    ``history`` is the Senate history set after merging; its size and
    first/last seen range go into the metadata.  ``live_counts`` holds what
    each source returned this run, keyed by chamber key; when given, those
    are the chamber counts, so a dead source reports zero even though
    history still fills its output list.
    """
    house_out = _prepare(house)
    senate_out = _prepare(senate)
    combined = sort_records(dedupe(house_out + senate_out))

    live_counts = live_counts or {}
    counts = {
        config.HOUSE_KEY: live_counts.get(config.HOUSE_KEY, len(house_out)),
        config.SENATE_KEY: live_counts.get(config.SENATE_KEY, len(senate_out)),
    }

    metadata = {
        "generatedAt": generated_at or datetime.now(timezone.utc).isoformat(),
        "counts": {**counts, "all": len(combined)},
        "sources": {
            config.HOUSE_KEY: config.HOUSE_SOURCE,
            config.SENATE_KEY: config.SENATE_SOURCE,
        },
    }
    if history is not None:
        metadata["history"] = {config.SENATE_KEY: history_stats(history)}

    for chamber, key in ((config.HOUSE, config.HOUSE_KEY), (config.SENATE, config.SENATE_KEY)):
        if counts[key] == 0:
            log.warning("No %s hearings in this build", chamber)
    return Assembly(house=house_out, senate=senate_out, combined=combined, metadata=metadata)
