"""Tests for fetch.py — Senate page and House API retrieval."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx

import config
from fetch import FetchError, check_senate_html, fetch_house_payload, fetch_senate_html

SENATE_URL = "https://senate.example.test/committee/schedwk.asp"
HOUSE_URL = "https://house.example.test/api/schedule"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestFetchSenateHtml:
    def test_returns_page(self):
        client = _client(lambda req: httpx.Response(200, text="<html><table></table></html>"))
        assert fetch_senate_html(client, SENATE_URL).startswith("<html>")

    def test_uses_configured_url(self, monkeypatch):
        seen = []

        def handler(req):
            seen.append(str(req.url))
            return httpx.Response(200, text="<table></table>")

        monkeypatch.setattr(config, "SENATE_SCHEDULE_URL", SENATE_URL)
        fetch_senate_html(_client(handler))
        assert seen == [SENATE_URL]

    def test_server_error(self):
        client = _client(lambda req: httpx.Response(503, text="unavailable"))
        with pytest.raises(FetchError, match="HTTP 503"):
            fetch_senate_html(client, SENATE_URL)

    def test_not_html(self):
        client = _client(lambda req: httpx.Response(200, text="Access denied"))
        with pytest.raises(FetchError, match="no HTML"):
            fetch_senate_html(client, SENATE_URL)

    def test_transport_error(self):
        def handler(req):
            raise httpx.ConnectError("connection refused", request=req)

        with pytest.raises(FetchError, match="HTTP error"):
            fetch_senate_html(_client(handler), SENATE_URL)


class TestCheckSenateHtml:
    def test_page_passes_through(self):
        assert check_senate_html("<TABLE></TABLE>", "saved") == "<TABLE></TABLE>"

    def test_saved_block_page_rejected(self):
        with pytest.raises(FetchError, match="output/senate.html"):
            check_senate_html("Access denied", "output/senate.html")


class TestFetchHousePayload:
    def test_returns_json_text(self):
        body = '{"data": {"rows": []}}'
        client = _client(lambda req: httpx.Response(200, text=body))
        assert fetch_house_payload(client, week="255", url=HOUSE_URL) == body

    def test_week_sent_as_query_param(self, monkeypatch):
        seen = []

        def handler(req):
            seen.append(req.url.params.get("week"))
            return httpx.Response(200, text="[]")

        monkeypatch.setenv("WEEK", "12")
        fetch_house_payload(_client(handler), url=HOUSE_URL)
        fetch_house_payload(_client(handler), week="255", url=HOUSE_URL)
        assert seen == ["12", "255"]

    def test_challenge_page_rejected(self):
        client = _client(lambda req: httpx.Response(200, text="<html>Just a moment...</html>"))
        with pytest.raises(FetchError, match="non-JSON"):
            fetch_house_payload(client, week="0", url=HOUSE_URL)

    def test_forbidden(self):
        client = _client(lambda req: httpx.Response(403))
        with pytest.raises(FetchError, match="HTTP 403"):
            fetch_house_payload(client, week="0", url=HOUSE_URL)

    def test_no_url_configured(self, monkeypatch):
        def handler(req):
            raise AssertionError("no request expected")

        monkeypatch.setattr(config, "HOUSE_API_URL", "")
        assert fetch_house_payload(_client(handler)) is None
