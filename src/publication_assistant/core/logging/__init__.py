# src/publication_assistant/core/logging/
# ├─ __init__.py      public API
# ├─ builder.py       make_dict_config(settings) + setup_logging(settings) + queue mode
# ├─ formatters.py    JsonFormatter, ColorFormatter
# ├─ filters.py       RequestIdFilter, RedactFilter (+ contextvar helpers)
# ├─ handlers.py      handler dicts for dictConfig (console / file)
# └─ middleware.py    RequestIDMiddleware

from .builder import make_dict_config, setup_logging, stop_queue_logging
from .filters import RedactFilter, RequestIdFilter, get_request_id, set_request_id
from .middleware import RequestIDMiddleware

__all__ = [
    "setup_logging",
    "stop_queue_logging",
    "make_dict_config",
    "set_request_id",
    "get_request_id",
    "RequestIdFilter",
    "RedactFilter",
    "RequestIDMiddleware",
]
