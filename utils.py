"""Text normalization helpers and the shared HTTP client."""

from __future__ import annotations

import re

import httpx
from bs4 import BeautifulSoup

import config

USER_AGENT = "Mozilla/5.0 (compatible; ScheduleBot/1.0)"

# Non-breaking and zero-width spaces show up in both sources' cell text
_WHITESPACE_RE = re.compile(r"[\s\u00a0\u200b]+")
_MERIDIEM_RE = re.compile(r"\b([ap])\.m\.", re.IGNORECASE)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def get_http_client(retries: int = 3, timeout: float | None = None) -> httpx.Client:
    """Create an httpx client with retry transport and standard headers."""
    transport = httpx.HTTPTransport(retries=retries)
    return httpx.Client(
        transport=transport,
        timeout=config.HTTP_TIMEOUT if timeout is None else timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


def normalize(value) -> str:
    """Collapse runs of whitespace to single spaces and trim.

    Non-string input yields an empty string.
    """
    if not isinstance(value, str):
        return ""
    return _WHITESPACE_RE.sub(" ", value).strip()


def canonicalize_clock(value) -> str:
    """Normalize a clock string, rewriting 'a.m.'/'p.m.' as 'AM'/'PM'.

    '10:00 a.m.' -> '10:00 AM'.  Everything else is left as-is.
    """
    text = normalize(value)
    if not text:
        return ""
    return _MERIDIEM_RE.sub(lambda m: m.group(1).upper() + "M", text)


def html_fragment_to_text(html) -> str:
    """Return the normalized visible text of an HTML fragment."""
    if not isinstance(html, str) or not html.strip():
        return ""
    soup = BeautifulSoup(f"<div>{html}</div>", "lxml")
    return normalize(soup.get_text(" "))


def cell_to_lines(html) -> list[str]:
    """Split a table cell's inner HTML on <br> tags into normalized text lines.

    Empty lines are dropped, so '10:00 a.m.<br><br>Plenary Hall' gives
    ['10:00 a.m.', 'Plenary Hall'].
    """
    if not isinstance(html, str):
        return []
    lines = (html_fragment_to_text(chunk) for chunk in _BR_RE.split(html))
    return [line for line in lines if line]
