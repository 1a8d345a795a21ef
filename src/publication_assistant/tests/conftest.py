"""
Core pytest configuration for the whole test suite.

Provides the database fixtures every test layer needs. Domain fixtures
(repositories, sample employees and publications, the HTTP client) live in
`tests/test_fixtures/` and are re-exported at the bottom of this module.

Database selection:
  1. `TEST_DATABASE_URL` environment variable (e.g. a Postgres test database in CI)
  2. an in-memory SQLite database, created fresh for every test
"""

import logging
import os
from typing import AsyncGenerator
from urllib.parse import urlparse

# Silence noisy third-party loggers before they are imported
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "httpx",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from publication_assistant.config import get_settings
from publication_assistant.core.logging.builder import setup_logging
from publication_assistant.database.base import Base
import publication_assistant.models  # noqa: F401 - registers tables on Base.metadata

settings = get_settings()
logger = logging.getLogger(__name__)

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install the application logging config once per session.

    pytest adds its caplog handler to the root logger per test phase, after
    this runs, so `caplog` keeps working.
    """
    setup_logging(settings)
    yield


@pytest.fixture()
def restore_logging():
    """Re-install the session logging config after a test that replaced it."""
    yield
    setup_logging(settings)


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    if parsed.hostname is None:
        return db_url
    return f"{parsed.scheme}://{parsed.hostname}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    return os.getenv("TEST_DATABASE_URL") or SQLITE_MEMORY_URL


TEST_DATABASE_URL = get_test_database_url()
logger.info(f"Using test DB: {safe_log_db_url(TEST_DATABASE_URL)}")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh schema per test.

    In-memory SQLite lives as long as its connection, so StaticPool keeps a
    single connection shared by every session of the test.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Same options as the application session factory
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session
        await session.rollback()


# Domain fixtures
from publication_assistant.tests.test_fixtures.repository_fixtures import (  # noqa: E402,F401
    publication_repository,
    employee_repository,
    employee_factory,
    publication_factory,
    employee,
    library,
)
from publication_assistant.tests.test_fixtures.api_fixtures import (  # noqa: E402,F401
    app,
    client,
)
