import logging

import pytest

from publication_assistant.config import Settings
from publication_assistant.core.logging.builder import make_dict_config, setup_logging

pytestmark = pytest.mark.usefixtures("restore_logging")


def make_settings(**overrides) -> Settings:
    values = {
        "ENV": "development",
        "LOG_FORMAT": "json",
        "LOG_LEVEL": "INFO",
        "LOG_TO_STDOUT": True,
        "LOG_MAX_BYTES": 1000,
        "LOG_BACKUP_COUNT": 1,
        "ENABLE_SQL_LOGGING": False,
    }
    values.update(overrides)
    return Settings(**values)


def test_stdout_mode_uses_console_handlers_only(tmp_path):
    cfg = make_dict_config(make_settings(LOG_DIR=tmp_path))

    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["loggers"][""]["handlers"] == ["console", "error_console"]


def test_file_mode_adds_rotating_files(tmp_path):
    cfg = make_dict_config(make_settings(LOG_TO_STDOUT=False, LOG_DIR=tmp_path))

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"] == str(tmp_path / "app.log")
    assert cfg["handlers"]["error_file"]["level"] == "ERROR"
    # error files are always structured
    assert cfg["handlers"]["error_file"]["formatter"] == "json"


def test_text_format_selects_standard_formatter(tmp_path):
    cfg = make_dict_config(make_settings(LOG_FORMAT="text", LOG_DIR=tmp_path))
    assert cfg["handlers"]["console"]["formatter"] == "standard"


def test_sql_logging_switch(tmp_path):
    quiet = make_dict_config(make_settings(LOG_DIR=tmp_path))
    loud = make_dict_config(make_settings(LOG_DIR=tmp_path, ENABLE_SQL_LOGGING=True))

    assert quiet["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"
    assert loud["loggers"]["sqlalchemy.engine"]["level"] == "INFO"


def test_settings_normalize_case():
    settings = make_settings(LOG_LEVEL="debug", LOG_FORMAT="TEXT")
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.LOG_FORMAT == "text"


def test_setup_logging_creates_log_dir(tmp_path):
    log_dir = tmp_path / "logs"
    assert not log_dir.exists()

    setup_logging(make_settings(LOG_TO_STDOUT=False, LOG_DIR=log_dir))

    assert log_dir.exists()
    assert logging.getLogger().handlers


def test_file_handler_writes_json(tmp_path):
    setup_logging(make_settings(LOG_TO_STDOUT=False, LOG_DIR=tmp_path))

    logging.getLogger("publication_assistant.test").warning("file check", extra={"publication_id": 7})
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = (tmp_path / "app.log").read_text(encoding="utf-8")
    assert '"message": "file check"' in text
    assert '"publication_id": 7' in text
