# tests/conftest.py

"""Shared fixtures: an app on a throwaway SQLite file and an HTTP client for it."""

from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.db.session import Base
from app.main import create_app

API = "/api/products"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        LOG_DIR=str(tmp_path / "logs"),
        APP_ENV="test",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    async with application.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def make_product() -> Callable[..., dict[str, Any]]:
    """Build a valid electronics product payload; keyword args override fields."""

    def _make(**overrides: Any) -> dict[str, Any]:
        data = {
            "name": "Galaxy Phone X",
            "brand": "Samsung",
            "seller": "MegaStore",
            "product_description": "A flagship smartphone with a very good camera.",
            "price": 499.99,
            "discount": 10,
            "ratings": 4.5,
            "cod_availability": True,
            "total_stock_availability": 25,
            "category": "electronics",
            "colors": ["Black", "Silver"],
            "variants": ["128GB", "256GB"],
            "isActive": True,
        }
        data.update(overrides)
        return data

    return _make


@pytest.fixture
def make_clothing(make_product) -> Callable[..., dict[str, Any]]:
    def _make(**overrides: Any) -> dict[str, Any]:
        data = make_product(
            name="Cotton Tee Shirt",
            brand="Levis",
            category="clothing",
            colors=["White", "Blue"],
            variants=[],
            size=["M", "L"],
            price=19.99,
        )
        data.update(overrides)
        return data

    return _make
