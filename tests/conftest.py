"""Shared fixtures: a fresh SQLite database per test, a seeded catalog and an API client."""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from laundry_api.app.core.config import settings
from laundry_api.app.core.db import init_db
from laundry_api.app.main import app
from laundry_api.app.services.catalog_service import CatalogService

WASH_ID = uuid.UUID("11111111-1111-4111-8111-111111111111")
DRY_ID = uuid.UUID("22222222-2222-4222-8222-222222222222")


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the application at an empty, migrated database."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "laundry-test.db"))
    monkeypatch.setattr(settings, "identity_secret", "")
    monkeypatch.setattr(settings, "customer_id_header", "CustomerId")
    monkeypatch.setattr(settings, "empty_list_as_not_found", True)
    init_db()
    return settings.database_url


@pytest.fixture
def catalog():
    """Two services: wash & fold (cotton) and dry cleaning (wool)."""
    wash = asyncio.run(CatalogService.add_service("Wash & Fold", "Cotton", Decimal("5.00"), WASH_ID))
    dry = asyncio.run(CatalogService.add_service("Dry cleaning", "Wool", Decimal("12.50"), DRY_ID))
    return {"wash": wash, "dry": dry}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def customer_id():
    return uuid.uuid4()


@pytest.fixture
def headers(customer_id):
    return {"CustomerId": str(customer_id)}


def in_days(days: float) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)
