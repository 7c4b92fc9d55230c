"""Simple alerting for failing schedule sources.

Writes daily alert files to <raw_dir>/alerts/ and optionally posts to Slack
when a source has failed too many runs in a row.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import httpx

import config
from state import State

log = logging.getLogger(__name__)


def _format_alert(failing: list[dict]) -> str:
    """Build a human-readable alert message from a list of failing sources."""
    lines = [
        f"Schedule Alert: {len(failing)} source(s) failing",
        f"Generated at {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC",
        "",
    ]

    for entry in failing:
        lines.append(f"  {entry['source']}")
        lines.append(f"    Consecutive failures : {entry['consecutive_failures']}")
        lines.append(f"    Last success         : {entry.get('last_success') or 'never'}")
        lines.append(f"    Last failure         : {entry.get('last_failure') or 'unknown'}")
        if entry.get("last_error"):
            lines.append(f"    Last error           : {entry['last_error']}")
        lines.append("")

    return "\n".join(lines)


def _write_alert_file(message: str, alerts_dir: Path) -> Path:
    """Append the alert message to <alerts_dir>/YYYY-MM-DD.txt."""
    alerts_dir.mkdir(parents=True, exist_ok=True)
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    alert_path = alerts_dir / f"{today}.txt"

    with open(alert_path, "a", encoding="utf-8") as f:
        f.write(message)
        f.write("\n---\n")

    log.info("Alert written to %s", alert_path)
    return alert_path


def _post_to_slack(message: str, webhook_url: str) -> None:
    """Post an alert message to a Slack incoming webhook."""
    payload = {"text": f"```\n{message}\n```"}
    try:
        resp = httpx.post(webhook_url, json=payload, timeout=10)
        resp.raise_for_status()
        log.info("Slack alert sent successfully")
    except httpx.HTTPError as exc:
        log.warning("Failed to send Slack alert: %s", exc)


def check_and_alert(state: State, threshold: int | None = None,
                    failing: list[dict] | None = None) -> list[dict]:
    """Emit alerts for sources at or over the failure threshold.

    Returns the list of failing sources (empty list if all healthy).
    """
    if failing is None:
        threshold = config.ALERT_THRESHOLD if threshold is None else threshold
        failing = state.get_failing_scrapers(threshold=threshold)

    if not failing:
        log.debug("All sources healthy")
        return []

    message = _format_alert(failing)
    _write_alert_file(message, state.raw_dir / "alerts")

    webhook_url = config.get_slack_webhook_url()
    if webhook_url:
        _post_to_slack(message, webhook_url)

    return failing
