"""
Build and apply the logging configuration.

`make_dict_config(settings)` returns a `logging.config.dictConfig` mapping;
`setup_logging(settings)` applies it and, with `LOG_USE_QUEUE`, moves the
real handlers behind a `QueueListener` so request handlers only enqueue.

Handler selection:

    LOG_TO_STDOUT | LOG_DIR | handlers
    --------------+---------+-------------------------------
    true          | any     | console + error_console
    false         | unset   | console + error_console
    false         | set     | console + file + error_file
"""

import logging
import logging.config
import queue
import threading
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

from publication_assistant.config.settings import Settings
from publication_assistant.utils.logging import get_project_name

from .filters import RedactFilter, RequestIdFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)

STANDARD_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"

_queue_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None

_dropped_lock = threading.Lock()
_dropped_records = 0


class NonBlockingQueueHandler(QueueHandler):
    """QueueHandler that counts and drops records when a bounded queue is full."""

    def enqueue(self, record: logging.LogRecord) -> None:
        global _dropped_records
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            with _dropped_lock:
                _dropped_records += 1


def get_queue_stats() -> dict:
    with _dropped_lock:
        return {"dropped_logs": _dropped_records, "queue_active": _queue_listener is not None}


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    handler_names = list(handlers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
                "format": STANDARD_FORMAT,
            },
            "json": {
                "()": JsonFormatter,
                "env": settings.ENV,
                "service": get_project_name(default="publication-assistant"),
            },
        },
        "filters": {
            "request_id": {"()": RequestIdFilter},
            "redact": {"()": RedactFilter},
        },
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": handler_names,
                "level": settings.LOG_LEVEL,
            },
            "uvicorn.error": {
                "handlers": handler_names,
                "level": settings.LOG_LEVEL,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            # bound parameters can carry personal data (emails, names)
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "INFO" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the dictConfig; optionally switch the root logger to a queue.

    In queue mode the root logger keeps a single QueueHandler carrying the
    producer-side filters (request id must be read in the request's context)
    and a QueueListener thread runs the configured handlers.
    """
    global _queue_listener, _queue_handler

    stop_queue_logging()

    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    if not settings.LOG_USE_QUEUE:
        return

    root = logging.getLogger()
    real_handlers = list(root.handlers)
    if not real_handlers:
        return
    for handler in real_handlers:
        root.removeHandler(handler)

    max_size = settings.LOG_QUEUE_MAX_SIZE or 0
    log_queue: queue.Queue = queue.Queue(max_size)
    handler_cls = NonBlockingQueueHandler if max_size > 0 else QueueHandler

    queue_handler = handler_cls(log_queue)
    queue_handler.addFilter(RequestIdFilter())
    queue_handler.addFilter(RedactFilter())
    root.addHandler(queue_handler)

    listener = QueueListener(log_queue, *real_handlers, respect_handler_level=True)
    listener.start()

    _queue_listener = listener
    _queue_handler = queue_handler


def stop_queue_logging() -> None:
    """Flush and stop the queue listener, if one is running. Safe to call repeatedly."""
    global _queue_listener, _queue_handler

    listener, queue_handler = _queue_listener, _queue_handler
    _queue_listener = _queue_handler = None
    if listener is None:
        return

    root = logging.getLogger()
    if queue_handler is not None:
        root.removeHandler(queue_handler)
    listener.stop()
    # hand the real handlers back to the root logger
    for handler in listener.handlers:
        root.addHandler(handler)


__all__ = [
    "make_dict_config",
    "setup_logging",
    "stop_queue_logging",
    "get_queue_stats",
    "NonBlockingQueueHandler",
]
