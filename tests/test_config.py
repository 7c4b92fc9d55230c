"""Tests for config.py — run-time getters and defaults."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import config


class TestGetWeek:
    def test_default_is_current_week(self, monkeypatch):
        monkeypatch.delenv("WEEK", raising=False)
        assert config.get_week() == "0"

    def test_reads_env_on_each_call(self, monkeypatch):
        monkeypatch.setenv("WEEK", "255")
        assert config.get_week() == "255"
        monkeypatch.setenv("WEEK", "256")
        assert config.get_week() == "256"

    def test_empty_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("WEEK", "")
        assert config.get_week() == config.WEEK_DEFAULT


class TestGetSlackWebhookUrl:
    def test_returns_env_value(self, monkeypatch):
        monkeypatch.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.com/x")
        assert config.get_slack_webhook_url() == "https://hooks.slack.com/x"

    def test_returns_empty_when_unset(self, monkeypatch):
        monkeypatch.delenv("SLACK_WEBHOOK_URL", raising=False)
        assert config.get_slack_webhook_url() == ""


class TestDefaults:
    def test_chambers(self):
        assert config.CHAMBERS == (config.HOUSE, config.SENATE)
        assert config.HOUSE == "House of Representatives"
        assert config.SENATE == "Senate"

    def test_source_labels(self):
        assert config.HOUSE_SOURCE == "House of Representatives (API)"
        assert config.SENATE_SOURCE == "Senate Weekly Schedule"

    def test_artifact_keys_are_distinct(self):
        keys = [config.HOUSE_KEY, config.SENATE_KEY, config.ALL_KEY,
                config.METADATA_KEY, config.SENATE_HISTORY_KEY]
        assert len(set(keys)) == len(keys)

    def test_senate_url_is_https(self):
        assert config.SENATE_SCHEDULE_URL.startswith("https://")

    def test_numeric_settings(self):
        assert config.HTTP_TIMEOUT > 0
        assert config.ALERT_THRESHOLD >= 1
