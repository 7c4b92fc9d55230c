"""Tests for models.py — Hearing dedup key and JSON conversion."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from models import DEFAULT_STATUS, Hearing, content_id


def _make_hearing(**overrides) -> Hearing:
    defaults = dict(
        chamber=config.SENATE,
        committee="Committee on Finance",
        date="2025-08-12",
        time="10:00 AM",
        venue="Plenary Hall",
        agenda="Budget hearing",
        source=config.SENATE_SOURCE,
    )
    defaults.update(overrides)
    return Hearing(**defaults)


class TestKey:
    def test_case_insensitive(self):
        a = _make_hearing(committee="Committee on Finance", time="10:00 AM")
        b = _make_hearing(committee="COMMITTEE ON FINANCE", time="10:00 am")
        assert a.key == b.key == "2025-08-12|10:00 am|committee on finance"

    def test_venue_not_part_of_key(self):
        assert _make_hearing(venue="A").key == _make_hearing(venue="B").key


class TestToDict:
    def test_camel_case_keys(self):
        data = _make_hearing(iso_date="2025-08-12T10:00:00").to_dict()
        assert data["isoDate"] == "2025-08-12T10:00:00"
        assert data["chamber"] == config.SENATE
        assert "searchText" in data
        assert "iso_date" not in data

    def test_seen_stamps_only_when_set(self):
        assert "firstSeenAt" not in _make_hearing().to_dict()
        data = _make_hearing(first_seen_at="2025-08-10T00:00:00+00:00",
                             last_seen_at="2025-08-11T00:00:00+00:00").to_dict()
        assert data["firstSeenAt"] == "2025-08-10T00:00:00+00:00"
        assert data["lastSeenAt"] == "2025-08-11T00:00:00+00:00"


class TestFromDict:
    def test_round_trip(self):
        original = _make_hearing(id="senate-abc", iso_date="2025-08-12T10:00:00",
                                 first_seen_at="2025-08-10T00:00:00+00:00")
        assert Hearing.from_dict(original.to_dict()) == original

    def test_missing_committee_is_rejected(self):
        assert Hearing.from_dict({"date": "2025-08-12", "committee": "  "}) is None

    def test_missing_date_is_rejected(self):
        assert Hearing.from_dict({"committee": "Committee on Finance"}) is None

    def test_legacy_branch_key(self):
        hearing = Hearing.from_dict({"branch": "Senate", "committee": "Finance", "date": "2025-08-12"})
        assert hearing.chamber == "Senate"

    def test_non_string_values_become_empty(self):
        hearing = Hearing.from_dict({"committee": "Finance", "date": "2025-08-12",
                                     "venue": None, "time": 10})
        assert hearing.venue == ""
        assert hearing.time == ""

    def test_status_defaults(self):
        hearing = Hearing.from_dict({"committee": "Finance", "date": "2025-08-12"})
        assert hearing.status == DEFAULT_STATUS

    def test_date_label_resolved_with_record_year(self):
        hearing = Hearing.from_dict({
            "committee": "Finance",
            "date": "Tuesday, December 30",
            "firstSeenAt": "2025-12-29T00:00:00+00:00",
        })
        assert hearing.date == "2025-12-30"

    def test_unresolvable_date_label_is_rejected(self):
        assert Hearing.from_dict({"committee": "Finance", "date": "sometime soon"}) is None

    def test_missing_id_gets_content_id(self):
        hearing = Hearing.from_dict({"chamber": "Senate", "committee": "Finance",
                                     "date": "2025-08-12", "time": "10:00 AM"})
        assert hearing.id == content_id("senate", hearing)


class TestContentId:
    def test_stable_across_instances(self):
        assert content_id("senate", _make_hearing()) == content_id("senate", _make_hearing(venue="X"))

    def test_differs_by_key(self):
        assert content_id("senate", _make_hearing()) != content_id("senate", _make_hearing(time="1:00 PM"))

    def test_prefix_and_length(self):
        cid = content_id("senate", _make_hearing())
        assert cid.startswith("senate-")
        assert len(cid) == len("senate-") + 12
