"""Fetch raw schedule payloads.

The Senate schedule is a static page and comes down with a plain GET.  The
House API sits behind bot mitigation; it is only fetched here when
HOUSE_API_URL points at a reachable endpoint, otherwise the browser-based
fetcher is expected to leave house_api.json in the raw directory.
"""

from __future__ import annotations

import json
import logging

import httpx

import config

log = logging.getLogger(__name__)


class FetchError(Exception):
    """A source could not be fetched or returned an unusable payload."""


def _get(client: httpx.Client, url: str, **params) -> str:
    try:
        resp = client.get(url, params=params or None)
    except httpx.HTTPError as e:
        raise FetchError(f"HTTP error for {url}: {e}") from e
    if resp.status_code != 200:
        raise FetchError(f"HTTP {resp.status_code} for {url}")
    return resp.text


def check_senate_html(text: str, origin: str) -> str:
    """Return text unchanged, or raise FetchError when it is not an HTML page."""
    lowered = text.lower()
    if "<html" not in lowered and "<table" not in lowered:
        raise FetchError(f"Senate schedule at {origin} returned no HTML")
    return text


def fetch_senate_html(client: httpx.Client, url: str | None = None) -> str:
    """Return the Senate weekly schedule page."""
    url = url or config.SENATE_SCHEDULE_URL
    text = check_senate_html(_get(client, url), url)
    log.info("Fetched Senate schedule (%d bytes)", len(text))
    return text


def fetch_house_payload(client: httpx.Client, week: str | None = None,
                        url: str | None = None) -> str | None:
    """Return the raw House API JSON text, or None when no API URL is configured."""
    url = url or config.HOUSE_API_URL
    if not url:
        log.info("HOUSE_API_URL not set; expecting %s from the browser fetcher", config.HOUSE_RAW)
        return None
    week = week or config.get_week()
    text = _get(client, url, week=week)
    try:
        json.loads(text)
    except ValueError as e:
        # Challenge pages come back as HTML with a 200
        raise FetchError(f"House API returned non-JSON for week {week}: {e}") from e
    log.info("Fetched House API week %s (%d bytes)", week, len(text))
    return text
