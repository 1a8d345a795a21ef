
# exceptions/
# ├── base.py                    # app-level errors raised by repositories (RepositoryError, NotFoundError, ...)
# ├── integrity_classifier.py    # classify SQLAlchemy IntegrityError by constraint kind
# └── mapper.py                  # map classified DB errors to app-level errors; db_error_handler

from .base import RepositoryError, NotFoundError, DuplicateError, InvalidFieldError

__all__ = ["RepositoryError", "NotFoundError", "DuplicateError", "InvalidFieldError"]
