import json
import logging

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from publication_assistant.config import Settings
from publication_assistant.core.logging.builder import setup_logging
from publication_assistant.core.logging.filters import get_request_id
from publication_assistant.core.logging.middleware import RequestIDMiddleware

pytestmark = pytest.mark.usefixtures("restore_logging")


@pytest.fixture
def echo_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/echo")
    async def echo():
        logging.getLogger("publication_assistant.echo").info("handling echo")
        return {"request_id": get_request_id()}

    return app


def test_request_id_in_response_and_logs(tmp_path, capsys, echo_app):
    setup_logging(Settings(LOG_FORMAT="json", LOG_LEVEL="INFO", LOG_TO_STDOUT=True, LOG_DIR=tmp_path))

    resp = TestClient(echo_app).get("/echo")

    assert resp.status_code == 200
    rid = resp.headers.get("X-Request-ID")
    assert rid
    # the handler saw the same id through the contextvar
    assert resp.json() == {"request_id": rid}

    stderr = capsys.readouterr().err
    records = []
    for line in stderr.splitlines():
        try:
            records.append(json.loads(line))
        except ValueError:
            continue
    assert any(r.get("request_id") == rid and r.get("message") == "handling echo" for r in records)


def test_incoming_request_id_is_reused(echo_app):
    resp = TestClient(echo_app).get("/echo", headers={"X-Request-ID": "client-supplied-1"})

    assert resp.headers["X-Request-ID"] == "client-supplied-1"
    assert resp.json() == {"request_id": "client-supplied-1"}


def test_oversized_request_id_is_replaced(echo_app):
    resp = TestClient(echo_app).get("/echo", headers={"X-Request-ID": "x" * 500})

    assert resp.headers["X-Request-ID"] != "x" * 500
    assert len(resp.headers["X-Request-ID"]) == 36


def test_request_id_cleared_after_request(echo_app):
    TestClient(echo_app).get("/echo")
    assert get_request_id() is None
