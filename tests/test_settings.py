"""
Tests for configuration.
"""

import pytest
from pathlib import Path

from envelope_budget.config import AppSettings, Settings, StorageSettings, get_settings


class TestStorageSettings:
    """Tests for storage configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("BUDGET_STORAGE_BACKEND", raising=False)
        settings = StorageSettings()
        assert settings.backend == "local"
        assert settings.state_key == "budgetAppState"
        assert settings.audit_path == Path(".envelope_budget") / "audit.jsonl"

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BUDGET_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("BUDGET_STORAGE_DATA_DIR", str(tmp_path))
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.data_dir == tmp_path

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            StorageSettings(backend="postgres")

    def test_state_key_cannot_be_a_path(self):
        with pytest.raises(ValueError):
            StorageSettings(state_key="../escape")


class TestAppSettings:
    """Tests for application settings."""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.currency_symbol == "₹"
        assert settings.chart_months == 6

    def test_name_bounds_must_be_ordered(self):
        with pytest.raises(ValueError):
            AppSettings(account_name_min_length=10, account_name_max_length=5)


class TestSettingsContainer:
    """Tests for the root settings object."""

    def test_sub_settings(self):
        settings = Settings()
        assert isinstance(settings.storage, StorageSettings)
        assert isinstance(settings.app, AppSettings)

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
