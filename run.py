#!/usr/bin/env python3
"""Committee hearing schedule pipeline.

Usage:
    python run.py                        # fetch both chambers, then build
    python run.py --skip-fetch           # rebuild from payloads saved in output/
    python run.py --week 255             # request a specific House schedule week
    python run.py --house-json FILE      # use a House API payload captured elsewhere
    python run.py --senate-html FILE     # use a saved Senate schedule page
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import httpx
from dotenv import load_dotenv

# Load .env before importing config
load_dotenv()

import config
from alerts import check_and_alert
from assemble import Assembly, assemble
from fetch import FetchError, check_senate_html, fetch_house_payload, fetch_senate_html
from models import Hearing
from reconcile import dedupe, merge_with_history
from scrapers import adapt_house_rows, adapt_senate_html, extract_house_rows
from state import State
from utils import get_http_client

log = logging.getLogger(__name__)


def _house_payload(state: State, client: httpx.Client | None, skip_fetch: bool,
                   week: str | None, house_json: Path | None) -> str:
    if house_json is not None:
        return house_json.read_text(encoding="utf-8")
    if not skip_fetch and client is not None:
        text = fetch_house_payload(client, week)
        if text is not None:
            state.write_raw(config.HOUSE_RAW, text)
            return text
    # Saved by an earlier run or dropped in by the browser fetcher
    text = state.read_raw(config.HOUSE_RAW)
    if text is None:
        raise FetchError(f"no House payload in {state.raw_dir / config.HOUSE_RAW}")
    return text


def _senate_payload(state: State, client: httpx.Client | None, skip_fetch: bool,
                    senate_html: Path | None) -> str:
    if senate_html is not None:
        return check_senate_html(senate_html.read_text(encoding="utf-8"), str(senate_html))
    if skip_fetch or client is None:
        path = state.raw_dir / config.SENATE_RAW
        text = state.read_raw(config.SENATE_RAW)
        if text is None:
            raise FetchError(f"no Senate payload in {path}")
        return check_senate_html(text, str(path))
    text = fetch_senate_html(client)
    state.write_raw(config.SENATE_RAW, text)
    return text


def _record_health(state: State, source: str, count: int, error: str | None = None) -> None:
    try:
        state.record_scraper_run(source, count, error=error)
    except OSError as e:
        log.warning("Could not record health for %s: %s", source, e)


def collect(state: State, source: str, loader: Callable[[], list[Hearing]]) -> list[Hearing]:
    """Run one source's fetch + adapt; a failure yields no records, never an abort."""
    try:
        records = loader()
    except (FetchError, httpx.HTTPError, OSError, ValueError) as e:
        log.error("%s source failed, continuing without it: %s", source, e)
        _record_health(state, source, 0, error=str(e))
        return []
    if not records:
        log.warning("%s source returned no hearings", source)
    _record_health(state, source, len(records))
    return records


def run_pipeline(
    state: State,
    client: httpx.Client | None = None,
    skip_fetch: bool = False,
    week: str | None = None,
    house_json: Path | None = None,
    senate_html: Path | None = None,
    now: str | None = None,
) -> Assembly:
    """Fetch, adapt, reconcile, assemble, and write every canonical artifact.

    Only a failure to write the canonical outputs propagates (OSError).
    """
    now = now or datetime.now(timezone.utc).isoformat()

    house = collect(state, config.HOUSE_KEY, lambda: adapt_house_rows(
        extract_house_rows(_house_payload(state, client, skip_fetch, week, house_json), strict=True)))
    senate = collect(state, config.SENATE_KEY, lambda: adapt_senate_html(
        _senate_payload(state, client, skip_fetch, senate_html)))

    # History is read once here and written once below
    previous = state.read_prior_artifact(config.SENATE_HISTORY_KEY)
    if previous is None:
        log.info("No Senate history yet, starting a new one")
    history = merge_with_history(dedupe(senate), previous, now=now)

    assembly = assemble(
        dedupe(house), history, history=history, generated_at=now,
        live_counts={config.HOUSE_KEY: len(dedupe(house)), config.SENATE_KEY: len(dedupe(senate))},
    )

    state.write_artifact(config.HOUSE_KEY, assembly.house)
    state.write_artifact(config.SENATE_KEY, assembly.senate)
    state.write_artifact(config.ALL_KEY, assembly.combined)
    state.write_artifact(config.SENATE_HISTORY_KEY, assembly.senate)
    state.write_artifact(config.METADATA_KEY, assembly.metadata)
    return assembly


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Committee hearing schedule pipeline")
    parser.add_argument("--skip-fetch", action="store_true",
                        help="Build from payloads saved in the raw directory")
    parser.add_argument("--week", type=str, default=None,
                        help="House schedule week (default: $WEEK or current week)")
    parser.add_argument("--house-json", type=Path, default=None,
                        help="House API payload captured by another fetcher")
    parser.add_argument("--senate-html", type=Path, default=None,
                        help="Saved Senate schedule page")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    state = State()
    try:
        if args.skip_fetch:
            assembly = run_pipeline(state, skip_fetch=True, week=args.week,
                                    house_json=args.house_json, senate_html=args.senate_html)
        else:
            with get_http_client() as client:
                assembly = run_pipeline(state, client=client, week=args.week,
                                        house_json=args.house_json, senate_html=args.senate_html)
    except OSError as e:
        log.error("Failed to write schedule artifacts to %s: %s", state.data_dir, e)
        return 1

    counts = assembly.metadata["counts"]
    log.info("Static data generated. House=%d, Senate=%d, Total=%d",
             counts[config.HOUSE_KEY], counts[config.SENATE_KEY], counts["all"])

    try:
        check_and_alert(state)
    except OSError as e:
        log.warning("Failed to write source alert: %s", e)
    return 0


if __name__ == "__main__":
    sys.exit(main())
