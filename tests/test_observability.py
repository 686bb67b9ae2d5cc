"""
Tests for logging setup.
"""

import logging

import pytest

from docker_prebuilt.core.observability.logging_config import (
    FILE_ENV,
    LEVEL_ENV,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags_win(self, monkeypatch):
        monkeypatch.setenv(LEVEL_ENV, "ERROR")
        assert resolve_level(debug=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env_then_default(self, monkeypatch):
        monkeypatch.setenv(LEVEL_ENV, "INFO")
        assert resolve_level() == "INFO"
        monkeypatch.delenv(LEVEL_ENV)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self, monkeypatch):
        monkeypatch.delenv(FILE_ENV, raising=False)
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_falls_back(self, monkeypatch):
        monkeypatch.delenv(FILE_ENV, raising=False)
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_file_handler(self, tmp_path, monkeypatch):
        log_file = tmp_path / "install.log"
        monkeypatch.setenv(FILE_ENV, str(log_file))
        setup_logging("WARNING")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("docker_prebuilt.test").debug("detail line")
        for h in root.handlers:
            h.flush()
        assert "detail line" in log_file.read_text()
        for h in root.handlers:
            if isinstance(h, logging.FileHandler):
                h.close()
