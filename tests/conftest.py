"""Shared test fixtures and utilities for all tests."""
import asyncio
import os

import pytest
import pytest_asyncio
from dependency_injector import providers
from httpx import ASGITransport, AsyncClient

from src.app.containers import Container
from src.client import BankingControlPanelClient
from src.shared.database.database import Database, DatabaseSettings
from src.shared.database.unit_of_work import UnitOfWork
from tests.factories import ADMIN_HEADERS

WIRED_MODULES = [
    "src.app.api.v1.clients",
    "src.app.api.dependencies",
]


@pytest.fixture(scope="module")
def async_db_url(tmp_path_factory):
    """
    Database URL for the test module.

    Uses a temporary SQLite file by default. Set TEST_DATABASE_BACKEND=postgres to run
    against a PostgreSQL container instead (requires Docker).
    """
    if os.environ.get("TEST_DATABASE_BACKEND") == "postgres":
        from testcontainers.postgres import PostgresContainer

        with PostgresContainer("postgres:16-alpine") as postgres:
            connection_url = postgres.get_connection_url()
            yield connection_url.replace("postgresql+psycopg2://", "postgresql+asyncpg://")
    else:
        db_file = tmp_path_factory.mktemp("db") / "banking_control_panel.db"
        yield f"sqlite+aiosqlite:///{db_file}"


async def wait_till_db_ready(db: Database, max_attempts: int = 20):
    """
    Wait for database to be ready.

    Raises:
        Exception: If database is not ready after max_attempts
    """
    for attempt in range(max_attempts):
        try:
            async with db._engine.begin():
                return
        except Exception:
            await asyncio.sleep(0.2)
    raise Exception(f"Database not ready after {max_attempts} attempts")


@pytest_asyncio.fixture(scope="function")
async def db(async_db_url):
    """
    Create database instance with test database.
    Function-scoped for test isolation.
    """
    db = Database(DatabaseSettings(db_url=async_db_url))
    await wait_till_db_ready(db)
    yield db
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def clean_database(db):
    """Drop and recreate all tables before each test."""
    await db.drop_tables()
    await db.create_tables()
    yield db


@pytest.fixture(scope="function")
def test_container(clean_database):
    """
    Create a test container with database override for proper test isolation.
    Function-scoped to ensure each test gets a fresh container.
    """
    container = Container()
    container.database.override(providers.Object(clean_database))
    container.wire(modules=WIRED_MODULES)
    yield container
    container.database.reset_override()
    container.unwire()


@pytest_asyncio.fixture(scope="function")
async def test_app(test_container):
    """
    Create test application with container.
    Function-scoped for test isolation.
    """
    from fastapi import FastAPI
    from contextlib import asynccontextmanager
    from src.app.api.v1 import clients

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Database tables are already created by clean_database fixture
        yield

    config = test_container.config()
    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        lifespan=lifespan
    )
    app.state.container = test_container
    app.include_router(clients.router, prefix="/api/v1")

    yield app


@pytest_asyncio.fixture
async def banking_client(test_app):
    """API client authenticated as an admin."""
    transport = ASGITransport(app=test_app)
    http_client = AsyncClient(transport=transport, base_url="http://test")
    client = BankingControlPanelClient(base_url="http://test", client=http_client, headers=ADMIN_HEADERS)

    async with client:
        yield client
    await http_client.aclose()


@pytest_asyncio.fixture
async def http_client(test_app):
    """Raw httpx client without identity headers."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# =========================================================================
# Repository and service fixtures from container
# =========================================================================

@pytest.fixture
def unit_of_work(test_container) -> UnitOfWork:
    return test_container.unit_of_work()


@pytest.fixture
def client_repository(test_container):
    """Get client repository from container."""
    return test_container.client_repository()


@pytest.fixture
def search_record_repository(test_container):
    """Get search record repository from container."""
    return test_container.search_record_repository()


@pytest.fixture
def client_query_engine(test_container):
    """Get client query engine from container."""
    return test_container.client_query_engine()


@pytest.fixture
def recent_search_log(test_container):
    """Get recent search log from container."""
    return test_container.recent_search_log()


@pytest.fixture
def client_catalog_service(test_container):
    """Get client catalog service from container."""
    return test_container.client_catalog_service()
