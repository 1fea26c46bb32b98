# tests/test_shared.py
"""
Shared Utility Tests - Validators, Time Windows, Settings and Logging

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- ratetick.shared.validators (input validation helpers)
- ratetick.shared.timeutils (clock and window bounds)
- ratetick.shared.logging_conf (setup_logging)
- ratetick.config.settings (Settings)
"""
import logging  # Logging levels and handler inspection
from contextlib import contextmanager  # Root logger restoration
from datetime import date, datetime, timedelta, timezone  # Window bounds
from logging.handlers import RotatingFileHandler  # File handler type check

import pytest  # Testing framework for writing and running tests
from pydantic import ValidationError as SettingsError  # Raised for invalid settings

from ratetick.config.settings import Settings
from ratetick.shared.logging_conf import setup_logging
from ratetick.shared.timeutils import day_window, to_naive_utc, trailing_window, utcnow
from ratetick.shared.validators import (
    parse_iso_date,
    sanitize_pair,
    validate_http_url,
    validate_log_level,
    validate_provider_name,
)


class TestValidators:
    def test_sanitize_pair(self):
        assert sanitize_pair(" eur/btc ") == "EUR/BTC"
        assert sanitize_pair("") == ""
        assert sanitize_pair(None) == ""

    def test_parse_iso_date(self):
        assert parse_iso_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["2023-02-29", "2024-2-3", "2024/02/03", "", None, 20240203, " 2024-02-03"])
    def test_parse_iso_date_rejects(self, value):
        assert parse_iso_date(value) is None

    def test_provider_names(self):
        assert validate_provider_name("binance")
        assert validate_provider_name("my_source-2")
        assert not validate_provider_name("")
        assert not validate_provider_name("bin ance")

    def test_log_levels(self):
        assert validate_log_level("debug")
        assert validate_log_level("WARNING")
        assert not validate_log_level("LOUD")
        assert not validate_log_level("")

    def test_http_urls(self):
        assert validate_http_url("https://api.binance.com/api/v3")
        assert not validate_http_url("ftp://example.com")
        assert not validate_http_url("api.binance.com")


class TestTimeUtils:
    def test_utcnow_is_naive_and_whole_seconds(self):
        now = utcnow()
        assert now.tzinfo is None
        assert now.microsecond == 0

    def test_to_naive_utc(self):
        aware = datetime(2024, 5, 10, 1, 0, 0, 500, tzinfo=timezone(timedelta(hours=3)))
        assert to_naive_utc(aware) == datetime(2024, 5, 9, 22, 0, 0)
        assert to_naive_utc(datetime(2024, 5, 10, 1, 0, 0, 500)) == datetime(2024, 5, 10, 1, 0, 0)

    def test_day_window(self):
        assert day_window(date(2024, 5, 10)) == (
            datetime(2024, 5, 10, 0, 0, 0),
            datetime(2024, 5, 10, 23, 59, 59),
        )

    def test_trailing_window(self):
        now = datetime(2024, 5, 10, 12, 0, 0)
        assert trailing_window(now) == (datetime(2024, 5, 9, 12, 0, 0), now)


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PREFERRED_PROVIDER", "DEFAULT_PROVIDER", "BINANCE_BASE_URL", "HTTP_TIMEOUT_SECONDS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        s = Settings(_env_file=None)

        assert s.preferred_provider == "binance"
        assert s.http_timeout_seconds == 10
        assert s.binance_base_url == "https://api.binance.com/api/v3"
        assert s.log_level == "INFO"

    def test_env_overrides_are_normalized(self, monkeypatch):
        monkeypatch.setenv("PREFERRED_PROVIDER", "Binance")
        monkeypatch.setenv("BINANCE_BASE_URL", "http://localhost:8080/api/")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        s = Settings(_env_file=None)

        assert s.preferred_provider == "binance"
        assert s.binance_base_url == "http://localhost:8080/api"
        assert s.log_level == "DEBUG"

    @pytest.mark.parametrize("name,value", [
        ("PREFERRED_PROVIDER", "bad name!"),
        ("BINANCE_BASE_URL", "not-a-url"),
        ("LOG_LEVEL", "LOUD"),
        ("HTTP_TIMEOUT_SECONDS", "0"),
    ])
    def test_invalid_values_rejected(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(SettingsError):
            Settings(_env_file=None)


@contextmanager
def _restored_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        yield root
    finally:
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)


class TestSetupLogging:
    def test_log_dir_writes_rotating_file(self, tmp_path):
        with _restored_root_logger() as root:
            setup_logging(level="debug", log_dir=tmp_path / "logs", log_to_stdout=False)

            assert root.level == logging.DEBUG
            assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
            assert (tmp_path / "logs" / "ratetick.log").exists()

    def test_noisy_loggers_are_quieted(self):
        with _restored_root_logger():
            setup_logging(level=logging.DEBUG, log_to_stdout=True)
            assert logging.getLogger("urllib3").level == logging.WARNING
