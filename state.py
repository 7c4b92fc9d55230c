"""JSON artifact store: canonical outputs, raw scrape payloads, and source health."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from models import Hearing

log = logging.getLogger(__name__)

HEALTH_FILE = "scraper_health.json"


def _atomic_write(path: Path, text: str) -> None:
    """Write text to path via a temp file + os.replace so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except Exception:
        os.unlink(tmp_path)
        raise


class State:
    """JSON artifact store for canonical outputs, raw payloads, and source health.

    Canonical artifacts (``<key>.json``) live in ``data_dir``; raw scrape
    payloads live in ``raw_dir``.  Each run reads history once and writes
    once; concurrent runs are not supported.
    """

    def __init__(self, data_dir: Path | None = None, raw_dir: Path | None = None):
        if data_dir is None or raw_dir is None:
            import config
            data_dir = data_dir or config.DATA_DIR
            raw_dir = raw_dir or config.RAW_DIR

        self.data_dir = Path(data_dir)
        self.raw_dir = Path(raw_dir)

    def artifact_path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    # ------------------------------------------------------------------
    # Canonical artifacts
    # ------------------------------------------------------------------

    def read_json(self, key: str):
        """Parsed artifact, or None when it is absent, empty, or corrupt."""
        path = self.artifact_path(key)
        if not path.exists():
            return None
        try:
            text = path.read_text(encoding="utf-8").strip()
            if not text:
                return None
            return json.loads(text)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            log.warning("Failed to read %s, ignoring it: %s", path, e)
            return None

    def read_prior_artifact(self, key: str) -> list[Hearing] | None:
        """Records stored under key.

        None means there is no usable artifact (never written, or corrupt);
        an empty list means a previous run wrote zero records.
        """
        data = self.read_json(key)
        if data is None:
            return None
        if not isinstance(data, list):
            log.warning("Artifact %s is not a list, ignoring it", key)
            return None
        records = []
        for entry in data:
            hearing = Hearing.from_dict(entry) if isinstance(entry, dict) else None
            if hearing is not None:
                records.append(hearing)
        if len(records) != len(data):
            log.warning("Artifact %s: skipped %d unusable entries", key, len(data) - len(records))
        return records

    def write_artifact(self, key: str, data) -> Path:
        """Overwrite artifact key with pretty-printed JSON.

        ``data`` is a list of Hearings or any JSON-serializable value.
        OSError propagates: downstream consumers depend on this write.
        """
        if isinstance(data, list):
            data = [r.to_dict() if isinstance(r, Hearing) else r for r in data]
        path = self.artifact_path(key)
        _atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
        log.debug("Wrote %s", path)
        return path

    # ------------------------------------------------------------------
    # Raw scrape payloads
    # ------------------------------------------------------------------

    def read_raw(self, name: str) -> str | None:
        path = self.raw_dir / name
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Failed to read raw payload %s: %s", path, e)
            return None

    def write_raw(self, name: str, text: str) -> Path:
        path = self.raw_dir / name
        _atomic_write(path, text)
        return path

    # ------------------------------------------------------------------
    # Source health
    # ------------------------------------------------------------------

    def _read_health(self) -> dict[str, dict]:
        text = self.read_raw(HEALTH_FILE)
        if not text:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            log.warning("Source health file is corrupt, starting fresh: %s", e)
            return {}
        return data if isinstance(data, dict) else {}

    def record_scraper_run(self, source: str, count: int, error: str | None = None) -> None:
        """Log a source's run result for health monitoring."""
        health = self._read_health()
        entry = health.get(source)
        if not isinstance(entry, dict):
            entry = {"consecutive_failures": 0}
        now = datetime.now(timezone.utc).isoformat()

        if error is None:
            entry.update(last_success=now, last_count=count, consecutive_failures=0)
        else:
            entry.update(
                last_failure=now,
                last_error=error,
                consecutive_failures=int(entry.get("consecutive_failures") or 0) + 1,
            )
        health[source] = entry
        self.write_raw(HEALTH_FILE, json.dumps(health, indent=2) + "\n")

    def get_failing_scrapers(self, threshold: int = 3) -> list[dict]:
        """Sources with consecutive_failures >= threshold, worst first."""
        failing = [
            {"source": source, **entry}
            for source, entry in self._read_health().items()
            if isinstance(entry, dict) and int(entry.get("consecutive_failures") or 0) >= threshold
        ]
        return sorted(failing, key=lambda e: e["consecutive_failures"], reverse=True)
