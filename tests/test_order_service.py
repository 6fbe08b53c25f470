"""Tests for the order lifecycle in ``OrderService``."""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from laundry_api.app.core.config import settings
from laundry_api.app.core.db import get_connection
from laundry_api.app.core.exceptions import InvalidInputError, InvalidStateError, NotFoundError
from laundry_api.app.schemas.order import MAX_QUANTITY, OrderCreate, OrderStatus, OrderUpdate
from laundry_api.app.services import order_service
from laundry_api.app.services.order_service import ALLOWED_TRANSITIONS, OrderService
from laundry_api.app.services.order_store import OrderStore

NOW = datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def frozen_clock(monkeypatch):
    monkeypatch.setattr(order_service, "utcnow", lambda: NOW)


def run(coro):
    return asyncio.run(coro)


def place(customer_id, service_id, /, **overrides):
    fields = {
        "service_id": service_id,
        "quantity": 3,
        "expected_delivery_date": NOW + timedelta(days=7),
        "additional_description": "Gentle cycle",
    }
    fields.update(overrides)
    return run(OrderService.place_order(customer_id, OrderCreate(**fields)))


class TestPlaceOrder:

    def test_new_order_is_pending_and_owned_by_caller(self, catalog, customer_id):
        order = place(customer_id, catalog["wash"].id)

        assert order.status is OrderStatus.PENDING
        assert order.customer_id == customer_id
        assert order.service_id == catalog["wash"].id
        assert order.quantity == 3
        assert order.date_created == NOW
        assert run(OrderService.get_order(customer_id, order.id)) == order

    def test_customer_id_in_payload_is_ignored(self, catalog, customer_id):
        order = place(customer_id, catalog["wash"].id, customer_id=uuid.uuid4())
        assert order.customer_id == customer_id

    def test_each_order_gets_a_fresh_id(self, catalog, customer_id):
        ids = {place(customer_id, catalog["wash"].id).id for _ in range(5)}
        assert len(ids) == 5

    def test_naive_delivery_date_is_read_as_utc(self, catalog, customer_id):
        order = place(customer_id, catalog["wash"].id, expected_delivery_date=datetime(2030, 1, 8, 12, 0))
        assert order.expected_delivery_date == datetime(2030, 1, 8, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"service_id": None},
            {"service_id": uuid.UUID(int=0)},
            {"quantity": None},
            {"quantity": 0},
            {"quantity": -2},
            {"expected_delivery_date": None},
            {"expected_delivery_date": NOW - timedelta(hours=1)},
            {"expected_delivery_date": NOW},
            {"expected_delivery_date": datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5)))},
        ],
    )
    def test_invalid_request_is_rejected(self, catalog, customer_id, overrides):
        with pytest.raises(InvalidInputError):
            place(customer_id, catalog["wash"].id, **overrides)

    def test_quantity_beyond_storage_range_is_rejected(self, catalog, customer_id):
        request = OrderCreate.model_construct(
            service_id=catalog["wash"].id,
            quantity=MAX_QUANTITY + 1,
            expected_delivery_date=NOW + timedelta(days=7),
            additional_description=None,
            customer_id=None,
        )
        with pytest.raises(InvalidInputError):
            run(OrderService.place_order(customer_id, request))

    def test_unknown_service_is_not_found(self, catalog, customer_id):
        with pytest.raises(NotFoundError, match="Service with ID"):
            place(customer_id, uuid.uuid4())


class TestOwnership:

    @pytest.fixture
    def order(self, catalog, customer_id):
        return place(customer_id, catalog["dry"].id)

    @pytest.mark.parametrize(
        "operation",
        [
            lambda cid, oid: OrderService.get_order(cid, oid),
            lambda cid, oid: OrderService.get_order_status(cid, oid),
            lambda cid, oid: OrderService.cancel_order(cid, oid),
            lambda cid, oid: OrderService.edit_order(cid, oid, OrderUpdate(quantity=9)),
        ],
    )
    def test_foreign_order_looks_missing(self, order, operation):
        stranger = uuid.uuid4()
        with pytest.raises(NotFoundError) as foreign:
            run(operation(stranger, order.id))
        missing_id = uuid.uuid4()
        with pytest.raises(NotFoundError) as missing:
            run(operation(stranger, missing_id))
        assert foreign.value.message == missing.value.message.replace(str(missing_id), str(order.id))

    def test_foreign_calls_leave_order_untouched(self, order, customer_id):
        with pytest.raises(NotFoundError):
            run(OrderService.cancel_order(uuid.uuid4(), order.id))
        assert run(OrderService.get_order(customer_id, order.id)) == order

    def test_status_of_own_order(self, order, customer_id):
        status = run(OrderService.get_order_status(customer_id, order.id))
        assert status.order_id == order.id
        assert status.status is OrderStatus.PENDING


class TestCancel:

    def test_cancel_pending_order(self, catalog, customer_id):
        order = place(customer_id, catalog["wash"].id)
        confirmation = run(OrderService.cancel_order(customer_id, order.id))
        assert confirmation.message == "Order successfully cancelled."
        assert run(OrderService.get_order(customer_id, order.id)).status is OrderStatus.CANCELLED

    def test_cancelling_twice_fails_and_keeps_cancelled(self, catalog, customer_id):
        order = place(customer_id, catalog["wash"].id)
        run(OrderService.cancel_order(customer_id, order.id))
        with pytest.raises(InvalidStateError):
            run(OrderService.cancel_order(customer_id, order.id))
        assert run(OrderService.get_order(customer_id, order.id)).status is OrderStatus.CANCELLED

    def test_completed_order_cannot_be_cancelled(self, catalog, customer_id):
        order = place(customer_id, catalog["wash"].id)
        run(OrderService.advance_status(order.id, OrderStatus.COMPLETED))
        with pytest.raises(InvalidStateError):
            run(OrderService.cancel_order(customer_id, order.id))
        assert run(OrderService.get_order(customer_id, order.id)).status is OrderStatus.COMPLETED

    def test_in_progress_order_can_be_cancelled(self, catalog, customer_id):
        order = place(customer_id, catalog["wash"].id)
        run(OrderService.advance_status(order.id, OrderStatus.IN_PROGRESS))
        run(OrderService.cancel_order(customer_id, order.id))
        assert run(OrderService.get_order(customer_id, order.id)).status is OrderStatus.CANCELLED


class TestEdit:

    @pytest.fixture
    def order(self, catalog, customer_id):
        return place(customer_id, catalog["wash"].id)

    def test_zero_and_empty_values_change_nothing(self, order, customer_id):
        patch = OrderUpdate(quantity=0, expected_delivery_date=None, additional_description="")
        assert run(OrderService.edit_order(customer_id, order.id, patch)) == order
        assert run(OrderService.get_order(customer_id, order.id)) == order

    def test_empty_patch_changes_nothing(self, order, customer_id):
        assert run(OrderService.edit_order(customer_id, order.id, OrderUpdate())) == order

    def test_negative_quantity_is_ignored(self, order, customer_id):
        updated = run(OrderService.edit_order(customer_id, order.id, OrderUpdate(quantity=-1)))
        assert updated.quantity == order.quantity

    def test_present_values_replace_stored_ones(self, order, customer_id):
        new_date = NOW + timedelta(days=10)
        patch = OrderUpdate(quantity=5, expected_delivery_date=new_date, additional_description="Starch collars")

        updated = run(OrderService.edit_order(customer_id, order.id, patch))

        assert updated.quantity == 5
        assert updated.expected_delivery_date == new_date
        assert updated.additional_description == "Starch collars"
        assert run(OrderService.get_order(customer_id, order.id)) == updated

    def test_immutable_fields_survive_edit(self, order, customer_id):
        updated = run(OrderService.edit_order(customer_id, order.id, OrderUpdate(quantity=7)))
        assert (updated.id, updated.customer_id, updated.service_id, updated.status, updated.date_created) == (
            order.id,
            order.customer_id,
            order.service_id,
            order.status,
            order.date_created,
        )

    def test_explicit_null_clears_description(self, order, customer_id):
        patch = OrderUpdate.model_validate({"additionalDescription": None})
        updated = run(OrderService.edit_order(customer_id, order.id, patch))
        assert updated.additional_description is None
        assert updated.quantity == order.quantity

    @pytest.mark.parametrize("terminal", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
    def test_terminal_order_cannot_be_edited(self, order, customer_id, terminal):
        run(OrderService.advance_status(order.id, terminal))
        with pytest.raises(InvalidStateError):
            run(OrderService.edit_order(customer_id, order.id, OrderUpdate(quantity=4)))
        assert run(OrderService.get_order(customer_id, order.id)).quantity == order.quantity

    def test_early_year_delivery_date_is_stored_and_read_back(self, order, customer_id):
        early = datetime(500, 1, 1, tzinfo=timezone.utc)
        updated = run(OrderService.edit_order(customer_id, order.id, OrderUpdate(expected_delivery_date=early)))

        assert updated.expected_delivery_date == early
        assert run(OrderService.get_order(customer_id, order.id)) == updated
        assert run(OrderService.list_orders(customer_id))[0].expected_delivery_date == early

    def test_delivery_date_outside_utc_range_is_rejected(self, order, customer_id):
        late = datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5)))
        with pytest.raises(InvalidInputError, match="out of range"):
            run(OrderService.edit_order(customer_id, order.id, OrderUpdate(expected_delivery_date=late)))
        assert run(OrderService.get_order(customer_id, order.id)) == order

    def test_quantity_beyond_storage_range_is_rejected(self, order, customer_id):
        patch = OrderUpdate.model_construct(quantity=MAX_QUANTITY + 1)
        with pytest.raises(InvalidInputError):
            run(OrderService.edit_order(customer_id, order.id, patch))
        assert run(OrderService.get_order(customer_id, order.id)) == order

    def test_update_of_removed_order_is_not_found(self, order):
        conn = get_connection()
        try:
            conn.execute("DELETE FROM orders WHERE id = ?", (str(order.id),))
            conn.commit()
        finally:
            conn.close()

        with pytest.raises(NotFoundError, match=str(order.id)):
            run(OrderStore.update(order.model_copy(update={"quantity": 9})))


class TestListOrders:

    def test_orders_are_newest_first_with_service_details(self, catalog, customer_id, monkeypatch):
        placed = []
        for minutes, service in [(0, "wash"), (5, "dry"), (2, "wash")]:
            monkeypatch.setattr(order_service, "utcnow", lambda m=minutes: NOW + timedelta(minutes=m))
            placed.append(place(customer_id, catalog[service].id))
        place(uuid.uuid4(), catalog["wash"].id)

        summaries = run(OrderService.list_orders(customer_id))

        assert [s.id for s in summaries] == [placed[1].id, placed[2].id, placed[0].id]
        assert summaries[0].service_name == "Dry cleaning"
        assert summaries[0].material_type == "Wool"
        assert str(summaries[0].price) == "12.50"
        assert all(s.customer_id == customer_id for s in summaries)

    def test_same_instant_orders_are_listed_in_a_stable_order(self, catalog, customer_id):
        first = place(customer_id, catalog["wash"].id)
        second = place(customer_id, catalog["wash"].id)
        ids = [s.id for s in run(OrderService.list_orders(customer_id))]
        assert ids == [second.id, first.id]
        assert ids == [s.id for s in run(OrderService.list_orders(customer_id))]

    def test_no_orders_is_not_found(self, catalog, customer_id):
        with pytest.raises(NotFoundError, match="No orders found"):
            run(OrderService.list_orders(customer_id))

    def test_no_orders_is_empty_list_when_policy_is_off(self, catalog, customer_id, monkeypatch):
        monkeypatch.setattr(settings, "empty_list_as_not_found", False)
        assert run(OrderService.list_orders(customer_id)) == []


class TestAdvanceStatus:

    @pytest.mark.parametrize("source", list(OrderStatus))
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_transition_table_is_enforced(self, catalog, customer_id, source, target):
        order = place(customer_id, catalog["wash"].id)
        if source is not OrderStatus.PENDING:
            if source is OrderStatus.COMPLETED:
                run(OrderService.advance_status(order.id, OrderStatus.IN_PROGRESS))
            run(OrderService.advance_status(order.id, source))

        if target in ALLOWED_TRANSITIONS[source]:
            assert run(OrderService.advance_status(order.id, target)).status is target
        else:
            with pytest.raises(InvalidStateError):
                run(OrderService.advance_status(order.id, target))
            assert run(OrderService.get_order(customer_id, order.id)).status is source

    def test_terminal_states_have_no_exits(self):
        assert not ALLOWED_TRANSITIONS[OrderStatus.COMPLETED]
        assert not ALLOWED_TRANSITIONS[OrderStatus.CANCELLED]

    def test_unknown_order(self):
        with pytest.raises(NotFoundError):
            run(OrderService.advance_status(uuid.uuid4(), OrderStatus.IN_PROGRESS))
