import logging

import pytest

from publication_assistant.core.logging.filters import (
    RedactFilter,
    RequestIdFilter,
    get_request_id,
    reset_request_id,
    set_request_id,
)


def make_record():
    # name, level, pathname, lineno, msg, args, exc_info
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello %s", ("world",), None)


@pytest.fixture
def request_id():
    """Set a request id for the test and restore the previous value afterwards."""
    tokens = []

    def _set(value):
        tokens.append(set_request_id(value))

    yield _set
    for token in reversed(tokens):
        reset_request_id(token)


def test_request_id_filter_defaults_to_dash(request_id):
    request_id(None)
    rec = make_record()

    assert RequestIdFilter().filter(rec) is True
    assert rec.request_id == "-"


def test_request_id_filter_uses_contextvar(request_id):
    request_id("abc-123")
    rec = make_record()

    RequestIdFilter().filter(rec)

    assert rec.request_id == "abc-123"


def test_request_id_filter_respects_record_extra(request_id):
    request_id("context-id")
    rec = make_record()
    rec.request_id = "explicit"

    RequestIdFilter().filter(rec)

    assert rec.request_id == "explicit"


def test_reset_restores_previous_value():
    outer = set_request_id("outer")
    inner = set_request_id("inner")
    assert get_request_id() == "inner"

    reset_request_id(inner)
    assert get_request_id() == "outer"
    reset_request_id(outer)


def test_redact_filter_masks_sensitive_extras():
    rec = make_record()
    rec.password = "hunter2"
    rec.Authorization = "Bearer abc"
    rec.publication_id = 5

    assert RedactFilter().filter(rec) is True

    assert rec.password == RedactFilter.MASK
    assert rec.Authorization == RedactFilter.MASK
    assert rec.publication_id == 5
