"""
Handler entries for `logging.config.dictConfig`.

Each factory returns a plain dict; `make_dict_config` decides which of them
are active. All handlers run the "request_id" and "redact" filters.
"""

from pathlib import Path

from publication_assistant.config.settings import Settings

DEFAULT_FILTERS = ["request_id", "redact"]


def _formatter_name(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    """All records at LOG_LEVEL and above, to stderr."""
    return {
        "class": "logging.StreamHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filters": list(DEFAULT_FILTERS),
    }


def get_error_console_handler(settings: Settings) -> dict:
    """ERROR and above as JSON; used when no log files are written."""
    return {
        "class": "logging.StreamHandler",
        "formatter": "json",
        "level": "ERROR",
        "filters": list(DEFAULT_FILTERS),
    }


def _rotating_file(settings: Settings, file_name: str, *, level: str, formatter: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": formatter,
        "level": level,
        "filename": str(Path(settings.LOG_DIR) / file_name),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(DEFAULT_FILTERS),
    }


def get_file_handler(settings: Settings) -> dict:
    return _rotating_file(
        settings, "app.log", level=settings.LOG_LEVEL, formatter=_formatter_name(settings)
    )


def get_error_file_handler(settings: Settings) -> dict:
    # error files stay structured regardless of LOG_FORMAT
    return _rotating_file(settings, "errors.log", level="ERROR", formatter="json")


__all__ = [
    "get_console_handler",
    "get_error_console_handler",
    "get_file_handler",
    "get_error_file_handler",
]
