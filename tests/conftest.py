"""Pytest configuration and fixtures."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from condowater.api.main import create_app


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """
    Provides a clean in-memory SQLite database for each test function.
    """
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["condowater.core.models"]},
    )
    await Tortoise.generate_schemas()

    yield

    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db_session):
    """HTTP client bound to the app, sharing the test database."""
    app = create_app(init_db=False)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
