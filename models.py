"""Canonical hearing record shared by every stage of the pipeline."""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass, fields

import config
from dates import ISO_DATE_RE, infer_fallback_year, resolve_date
from utils import normalize

DEFAULT_STATUS = "Scheduled"
STATUS_SEPARATOR = " · "

# attribute name -> JSON key written for the front end
_JSON_KEYS = {
    "id": "id",
    "chamber": "chamber",
    "committee": "committee",
    "date": "date",
    "time": "time",
    "venue": "venue",
    "agenda": "agenda",
    "status": "status",
    "notes": "notes",
    "iso_date": "isoDate",
    "source": "source",
    "search_text": "searchText",
    "first_seen_at": "firstSeenAt",
    "last_seen_at": "lastSeenAt",
}
# Only written for history-tracked records
_OPTIONAL_KEYS = ("first_seen_at", "last_seen_at")
# Timestamps are merged by min/max, never by field fallback
SEEN_FIELDS = frozenset(_OPTIONAL_KEYS)


@dataclass
class Hearing:
    committee: str
    date: str  # YYYY-MM-DD
    chamber: str = ""
    time: str = ""  # "H:MM AM", empty when the source gives none
    venue: str = ""
    agenda: str = ""
    status: str = DEFAULT_STATUS
    notes: str = ""
    iso_date: str = ""  # YYYY-MM-DDTHH:MM:SS, cached from date + time
    source: str = ""
    id: str = ""
    search_text: str = ""
    first_seen_at: str = ""
    last_seen_at: str = ""

    @property
    def key(self) -> str:
        """Dedup key: the same hearing across scrapes shares date, time and committee."""
        return f"{self.date}|{self.time}|{self.committee}".lower()

    def to_dict(self) -> dict:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in _OPTIONAL_KEYS and not value:
                continue
            out[_JSON_KEYS[f.name]] = value
        return out

    @classmethod
    def from_dict(cls, data: Mapping) -> Hearing | None:
        """Rebuild a record from its JSON form.

        Returns None when committee or date are missing or the date can't be
        resolved.  Artifacts written before the chamber rename carry 'branch'.
        """
        values = {}
        for attr, json_key in _JSON_KEYS.items():
            raw = data.get(json_key)
            values[attr] = raw.strip() if isinstance(raw, str) else ""
        if not values["chamber"]:
            values["chamber"] = normalize(data.get("branch"))

        values["committee"] = normalize(values["committee"])
        day = values["date"]
        if day and not ISO_DATE_RE.match(day):
            day = resolve_date(day, infer_fallback_year(data))
        values["date"] = day
        if not values["committee"] or not values["date"]:
            return None
        values["status"] = values["status"] or DEFAULT_STATUS
        hearing = cls(**values)
        if not hearing.id:
            hearing.id = content_id(chamber_prefix(hearing.chamber), hearing)
        return hearing


def content_id(prefix: str, hearing: Hearing) -> str:
    """Deterministic id derived from the dedup key, stable across runs."""
    digest = hashlib.sha256(hearing.key.encode()).hexdigest()[:12]
    return f"{prefix}-{digest}"


def chamber_prefix(chamber: str) -> str:
    return "senate" if chamber == config.SENATE else "house"
