# tests/test_logging.py
"""Tests for the logging helpers."""

import logging

import pytest

from simpleschema.utils import logging as log_utils


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger(log_utils.ROOT_LOGGER_NAME)
    yield root
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    for f in root.filters[:]:
        root.removeFilter(f)
    root.addHandler(logging.NullHandler())
    root.setLevel(logging.NOTSET)
    root.propagate = True


class TestLogging:

    def test_get_logger_namespaces(self):
        assert log_utils.get_logger("simpleschema.compiler").name == "simpleschema.compiler"
        assert log_utils.get_logger("myapp").name == "simpleschema.myapp"

    def test_library_is_silent_by_default(self):
        root = logging.getLogger(log_utils.ROOT_LOGGER_NAME)
        assert any(isinstance(h, logging.NullHandler) for h in root.handlers)

    def test_setup_without_log_dir_writes_no_file(self, restore_root_logger):
        assert log_utils.setup_logging(level="DEBUG") is None
        assert log_utils.get_current_log_file() is None
        assert restore_root_logger.level == logging.DEBUG

    def test_session_log_file(self, tmp_path, restore_root_logger):
        log_file = log_utils.setup_logging(level="INFO", log_dir=tmp_path)
        assert log_file is not None
        assert log_file.parent == tmp_path
        session_id = log_utils.get_session_id()
        assert session_id and session_id in log_file.name

        log_utils.get_logger("simpleschema.tests").info("hello from tests")
        for handler in restore_root_logger.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "hello from tests" in text
        assert session_id in text

    def test_level_from_environment(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("SIMPLESCHEMA_LOG_LEVEL", "ERROR")
        log_utils.setup_logging()
        assert restore_root_logger.level == logging.ERROR

    def test_log_to_file_uses_configured_directory(self, tmp_path, monkeypatch, restore_root_logger):
        from simpleschema.config import get_config

        monkeypatch.setenv("SIMPLESCHEMA_HOME_DIR", str(tmp_path))
        get_config.cache_clear()
        try:
            assert log_utils.get_log_directory() == tmp_path / "logs"
            log_file = log_utils.setup_logging(level="INFO", log_to_file=True)
            assert log_file is not None
            assert log_file.parent == tmp_path / "logs"
            assert log_file.exists()
        finally:
            get_config.cache_clear()

    def test_explicit_log_dir_wins_over_config(self, tmp_path, restore_root_logger):
        log_file = log_utils.setup_logging(log_dir=tmp_path / "explicit", log_to_file=True)
        assert log_file.parent == tmp_path / "explicit"
