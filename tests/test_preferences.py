"""Tests for user preferences and app settings persistence."""

import json
import logging

import pytest

from queuetimer import settings as settings_mod
from queuetimer.database.db import get_session
from queuetimer.database.models import Preference
from queuetimer.preferences import (
    ALERT_LEVELS, DatabaseBackend, MemoryBackend, PreferenceStore,
    normalize_alert_level,
)
from queuetimer.settings import Settings, load_settings, save_settings


class _BrokenBackend:
    def persist(self, key, value):
        raise OSError("disk full")

    def retrieve(self, key):
        raise OSError("disk gone")


# ═══════════════════════════════════════════════════════════════════════════
#  ALERT LEVEL
# ═══════════════════════════════════════════════════════════════════════════


class TestAlertLevel:

    def test_defaults(self):
        prefs = PreferenceStore()
        assert prefs.alert_level == "off"
        assert prefs.notifications_enabled is False

    @pytest.mark.parametrize("level", ALERT_LEVELS)
    def test_valid_levels(self, level):
        prefs = PreferenceStore()
        assert prefs.set_alert_level(level) == level
        assert prefs.alert_level == level

    @pytest.mark.parametrize("raw, expected", [
        ("LOUD", "loud"),
        (" Medium ", "medium"),
        ("Soft", "soft"),
    ])
    def test_normalizes_case_and_whitespace(self, raw, expected):
        assert normalize_alert_level(raw) == expected

    @pytest.mark.parametrize("raw", ["blaring", "", None, 3])
    def test_invalid_falls_back_to_off(self, raw, caplog):
        prefs = PreferenceStore()
        prefs.set_alert_level("loud")
        with caplog.at_level(logging.WARNING, logger="queuetimer.preferences"):
            assert prefs.set_alert_level(raw) == "off"
        assert prefs.alert_level == "off"
        assert "Unknown alert level" in caplog.text

    def test_fallback_is_persisted(self):
        backend = MemoryBackend()
        PreferenceStore(backend).set_alert_level("nonsense")
        assert backend.values["alert_level"] == "off"


# ═══════════════════════════════════════════════════════════════════════════
#  NOTIFICATIONS FLAG
# ═══════════════════════════════════════════════════════════════════════════


class TestNotificationsFlag:

    def test_toggle(self):
        backend = MemoryBackend()
        prefs = PreferenceStore(backend)
        prefs.set_notifications_enabled(True)
        assert prefs.notifications_enabled is True
        assert backend.values["notifications_enabled"] is True

    def test_load_ignores_non_bool(self, caplog):
        prefs = PreferenceStore(MemoryBackend({"notifications_enabled": "yes"}))
        with caplog.at_level(logging.WARNING):
            prefs.load()
        assert prefs.notifications_enabled is False
        assert "notifications flag" in caplog.text


# ═══════════════════════════════════════════════════════════════════════════
#  LOADING & BACKENDS
# ═══════════════════════════════════════════════════════════════════════════


class TestLoading:

    def test_load_from_memory(self):
        backend = MemoryBackend({"alert_level": "medium", "notifications_enabled": True})
        prefs = PreferenceStore(backend).load()
        assert prefs.alert_level == "medium"
        assert prefs.notifications_enabled is True

    def test_load_missing_keeps_defaults(self):
        prefs = PreferenceStore(MemoryBackend()).load()
        assert prefs.alert_level == "off"
        assert prefs.notifications_enabled is False

    def test_load_corrupt_level(self, caplog):
        prefs = PreferenceStore(MemoryBackend({"alert_level": "deafening"}))
        with caplog.at_level(logging.WARNING):
            prefs.load()
        assert prefs.alert_level == "off"
        assert "Ignoring stored alert level" in caplog.text

    def test_failing_backend_is_swallowed(self, caplog):
        prefs = PreferenceStore(_BrokenBackend())
        assert prefs.set_alert_level("loud") == "loud"
        prefs.set_notifications_enabled(True)
        prefs.load()
        assert prefs.alert_level == "loud"
        assert prefs.notifications_enabled is True
        assert "Could not save preference" in caplog.text
        assert "Could not read preference" in caplog.text


class TestDatabaseBackend:

    def test_round_trip_through_sqlite(self):
        PreferenceStore(DatabaseBackend()).set_alert_level("soft")
        PreferenceStore(DatabaseBackend()).set_notifications_enabled(True)

        prefs = PreferenceStore(DatabaseBackend()).load()
        assert prefs.alert_level == "soft"
        assert prefs.notifications_enabled is True

    def test_overwrites_existing_row(self):
        prefs = PreferenceStore(DatabaseBackend())
        prefs.set_alert_level("soft")
        prefs.set_alert_level("loud")
        with get_session() as db:
            rows = db.query(Preference).filter_by(key="alert_level").all()
            assert len(rows) == 1
            assert json.loads(rows[0].value) == "loud"

    def test_missing_row_keeps_default(self):
        prefs = PreferenceStore(DatabaseBackend()).load()
        assert prefs.alert_level == "off"


# ═══════════════════════════════════════════════════════════════════════════
#  APP SETTINGS
# ═══════════════════════════════════════════════════════════════════════════


class TestSettings:

    @pytest.fixture(autouse=True)
    def _settings_path(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings_mod, "APP_SUPPORT_DIR", tmp_path)
        monkeypatch.setattr(settings_mod, "SETTINGS_PATH", tmp_path / "settings.json")
        return tmp_path

    def test_defaults_when_missing(self):
        s = load_settings()
        assert s == Settings()
        assert s.tick_interval_ms == 100
        assert s.rich_animations is True

    def test_round_trip(self):
        s = Settings(rich_animations=False, export_dir="/tmp/logs", window_x=10)
        save_settings(s)
        assert load_settings() == s

    def test_unknown_keys_ignored(self, tmp_path):
        (tmp_path / "settings.json").write_text(
            json.dumps({"exit_animation_ms": 250, "legacy_key": 1}),
        )
        assert load_settings().exit_animation_ms == 250

    def test_corrupt_file_falls_back(self, tmp_path, caplog):
        (tmp_path / "settings.json").write_text("{not json")
        with caplog.at_level(logging.WARNING):
            assert load_settings() == Settings()
        assert "Unreadable settings" in caplog.text

    def test_resolved_export_dir_prefers_configured(self, tmp_path):
        s = Settings(export_dir=str(tmp_path / "out"))
        assert s.resolved_export_dir() == tmp_path / "out"

    def test_resolved_export_dir_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert Settings().resolved_export_dir() == tmp_path
        (tmp_path / "Downloads").mkdir()
        assert Settings().resolved_export_dir() == tmp_path / "Downloads"
