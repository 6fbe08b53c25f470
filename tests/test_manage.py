"""Tests for the operator commands in ``manage.py``."""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

import manage
from laundry_api.app.core.config import settings
from laundry_api.app.schemas.order import OrderCreate, OrderStatus
from laundry_api.app.services.catalog_service import CatalogService
from laundry_api.app.services.order_service import OrderService
from laundry_api.app.services.order_store import OrderStore


@pytest.fixture
def pending_order(catalog):
    request = OrderCreate(
        service_id=catalog["wash"].id,
        quantity=1,
        expected_delivery_date=datetime.now(timezone.utc) + timedelta(days=2),
    )
    return asyncio.run(OrderService.place_order(uuid.uuid4(), request))


def test_add_service(capsys):
    service_id = uuid.uuid4()
    code = manage.main(["add-service", "--name", "Duvet wash", "--material", "Down", "--price", "19.99", "--id", str(service_id)])

    assert code == 0
    assert str(service_id) in capsys.readouterr().out
    service = asyncio.run(CatalogService.get_service(service_id))
    assert service.service_name == "Duvet wash"
    assert service.price == Decimal("19.99")


def test_add_service_rejects_negative_price(capsys):
    assert manage.main(["add-service", "--name", "Free wash", "--material", "Cotton", "--price", "-1"]) == 1
    assert asyncio.run(CatalogService.list_services()) == []


def test_set_status_follows_state_machine(pending_order, capsys):
    assert manage.main(["set-status", "--order", str(pending_order.id), "--status", "InProgress"]) == 0
    assert manage.main(["set-status", "--order", str(pending_order.id), "--status", "Completed"]) == 0
    assert manage.main(["set-status", "--order", str(pending_order.id), "--status", "Pending"]) == 1

    order = asyncio.run(OrderStore.get(pending_order.id))
    assert order.status is OrderStatus.COMPLETED
    assert "cannot move from Completed to Pending" in capsys.readouterr().err


def test_set_status_unknown_order():
    assert manage.main(["set-status", "--order", str(uuid.uuid4()), "--status", "Completed"]) == 2


def test_issue_token(monkeypatch, capsys):
    monkeypatch.setattr(settings, "identity_secret", "s3cret")
    customer = uuid.uuid4()

    assert manage.main(["issue-token", "--customer", str(customer)]) == 0
    assert capsys.readouterr().out.startswith(f"{customer}.")


def test_issue_token_without_secret_fails():
    assert manage.main(["issue-token", "--customer", str(uuid.uuid4())]) == 1
