"""Tests for LARDER_* environment configuration."""

from __future__ import annotations

import pytest

from larder.config import load_config, validate_endpoint, validate_log_level


class TestDefaults:
    def test_defaults_without_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("ENDPOINT", "TIMEOUT", "MAX_RETRIES", "BACKOFF", "LOG_LEVEL", "SNAPSHOT_PATH"):
            monkeypatch.delenv(f"LARDER_{key}", raising=False)
        config = load_config()
        assert config.registry.endpoint == "https://supermarket.chef.io/api/v1"
        assert config.registry.timeout_seconds == 30.0
        assert config.registry.max_retries == 3
        assert config.snapshot.path == "universe.json"
        assert config.log.level == "info"


class TestOverrides:
    def test_values_are_read(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LARDER_ENDPOINT", "https://mirror.example.com/api/v1/")
        monkeypatch.setenv("LARDER_MAX_RETRIES", "5")
        monkeypatch.setenv("LARDER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LARDER_SNAPSHOT_PATH", "/var/lib/larder/universe.json")
        monkeypatch.setenv("LARDER_WEBHOOK_SECRET_REF", "HOOK_URL")
        config = load_config()
        assert config.registry.endpoint == "https://mirror.example.com/api/v1"
        assert config.registry.max_retries == 5
        assert config.log.level == "debug"
        assert config.snapshot.path == "/var/lib/larder/universe.json"
        assert config.notifications.webhook_secret_ref == "HOOK_URL"

    def test_numbers_are_clamped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LARDER_MAX_RETRIES", "99")
        monkeypatch.setenv("LARDER_TIMEOUT", "0")
        monkeypatch.setenv("LARDER_MAX_CONCURRENCY", "1000")
        config = load_config()
        assert config.registry.max_retries == 10
        assert config.registry.timeout_seconds == 1.0
        assert config.registry.max_concurrency == 64

    def test_non_numeric_value_names_the_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LARDER_MAX_RETRIES", "many")
        with pytest.raises(ValueError, match="LARDER_MAX_RETRIES"):
            load_config()


class TestValidators:
    @pytest.mark.parametrize(
        "value",
        ["supermarket.chef.io", "ftp://mirror/api/v1", "", "https://", "http://host path", "https://host/api v1"],
    )
    def test_bad_endpoints(self, value: str) -> None:
        with pytest.raises(ValueError, match="endpoint"):
            validate_endpoint(value)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("http://localhost:8080", "http://localhost:8080"),
            ("https://supermarket.chef.io/api/v1/", "https://supermarket.chef.io/api/v1"),
        ],
    )
    def test_good_endpoints(self, value: str, expected: str) -> None:
        assert validate_endpoint(value) == expected

    def test_bad_log_level(self) -> None:
        with pytest.raises(ValueError, match="log level"):
            validate_log_level("verbose")
