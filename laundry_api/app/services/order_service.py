"""
Business logic for the order lifecycle.

``OrderService`` validates new orders, enforces the status state
machine and applies customer edits.  Each customer-scoped operation
receives the caller's ``customer_id`` explicitly and resolves the order
through ``OrderStore.get_for_customer``, so foreign orders are reported
as not found.

Changes follow read, validate, build a new ``OrderRead`` with
``model_copy``, write.  Nothing here retries: store errors propagate to
the caller.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List

from laundry_api.app.core.exceptions import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    not_found_if_empty,
)
from laundry_api.app.schemas.order import (
    MAX_QUANTITY,
    CancelConfirmation,
    OrderCreate,
    OrderRead,
    OrderStatus,
    OrderStatusRead,
    OrderSummary,
    OrderUpdate,
)
from laundry_api.app.services.catalog_service import CatalogService
from laundry_api.app.services.order_store import OrderStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.IN_PROGRESS: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Clients may omit the offset; such values are read as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as e:
        raise InvalidInputError("Expected delivery date is out of range.") from e


def _not_found(order_id: uuid.UUID) -> NotFoundError:
    return NotFoundError(f"Order with ID {order_id} not found for this customer.")


class OrderService:
    """Customer order operations."""

    @classmethod
    async def place_order(cls, customer_id: uuid.UUID, request: OrderCreate) -> OrderRead:
        """Validate and persist a new order for ``customer_id``.

        Raises ``InvalidInputError`` if the service id is missing, the
        quantity is not positive or too large, or the expected delivery
        date is not in the future, and ``NotFoundError`` if the service
        does not exist.  Any customer id carried by ``request`` is ignored.
        """
        now = utcnow()
        if (
            request.service_id is None
            or request.service_id.int == 0
            or request.quantity is None
            or not 0 < request.quantity <= MAX_QUANTITY
            or request.expected_delivery_date is None
            or _as_utc(request.expected_delivery_date) <= now
        ):
            logger.warning("Customer %s sent an invalid order request", customer_id)
            raise InvalidInputError(
                "Service ID, a positive quantity and a future expected delivery date are required."
            )

        service = await CatalogService.get_service(request.service_id)
        if service is None:
            raise NotFoundError(f"Service with ID {request.service_id} not found.")

        if request.customer_id is not None and request.customer_id != customer_id:
            logger.warning(
                "Ignoring customer id %s in order payload from customer %s", request.customer_id, customer_id
            )

        order = OrderRead(
            id=uuid.uuid4(),
            customer_id=customer_id,
            service_id=service.id,
            quantity=request.quantity,
            expected_delivery_date=_as_utc(request.expected_delivery_date),
            additional_description=request.additional_description,
            status=OrderStatus.PENDING,
            date_created=now,
        )
        await OrderStore.create(order)
        logger.info("Customer %s placed order %s for service %s", customer_id, order.id, service.id)
        return order

    @classmethod
    async def get_order(cls, customer_id: uuid.UUID, order_id: uuid.UUID) -> OrderRead:
        """Return the caller's order or raise ``NotFoundError``."""
        order = await OrderStore.get_for_customer(customer_id, order_id)
        if order is None:
            raise _not_found(order_id)
        return order

    @classmethod
    async def get_order_status(cls, customer_id: uuid.UUID, order_id: uuid.UUID) -> OrderStatusRead:
        order = await cls.get_order(customer_id, order_id)
        return OrderStatusRead(order_id=order.id, status=order.status)

    @classmethod
    async def list_orders(cls, customer_id: uuid.UUID) -> List[OrderSummary]:
        """Return the caller's orders with service details, newest first.

        An empty result raises ``NotFoundError`` unless the empty-listing
        policy is switched off.
        """
        summaries = await OrderStore.list_summaries_for_customer(customer_id)
        return list(not_found_if_empty(summaries, "No orders found for this customer."))

    @classmethod
    async def cancel_order(cls, customer_id: uuid.UUID, order_id: uuid.UUID) -> CancelConfirmation:
        """Move a non-terminal order to ``Cancelled``.

        Raises ``NotFoundError`` for unknown or foreign orders and
        ``InvalidStateError`` if the order is already completed or
        cancelled.
        """
        order = await cls.get_order(customer_id, order_id)
        if order.status.is_terminal:
            logger.warning("Customer %s tried to cancel %s order %s", customer_id, order.status.value, order_id)
            raise InvalidStateError(
                "This order cannot be cancelled because it is already completed or cancelled."
            )
        await OrderStore.update(order.model_copy(update={"status": OrderStatus.CANCELLED}))
        logger.info("Customer %s cancelled order %s", customer_id, order_id)
        return CancelConfirmation()

    @classmethod
    async def edit_order(cls, customer_id: uuid.UUID, order_id: uuid.UUID, patch: OrderUpdate) -> OrderRead:
        """Apply a sparse patch to a non-terminal order.

        See ``OrderUpdate`` for which values replace the stored ones.  If
        the patch changes nothing the order is returned without a write.
        A quantity above ``MAX_QUANTITY`` or a delivery date that cannot
        be expressed in UTC raises ``InvalidInputError``.
        """
        order = await cls.get_order(customer_id, order_id)
        if order.status.is_terminal:
            logger.warning("Customer %s tried to edit %s order %s", customer_id, order.status.value, order_id)
            raise InvalidStateError(
                "This order cannot be edited because it is either completed or cancelled."
            )

        if patch.quantity is not None and patch.quantity > MAX_QUANTITY:
            raise InvalidInputError(f"Quantity must not exceed {MAX_QUANTITY}.")

        changes: dict = {}
        if patch.is_present("quantity") and patch.quantity is not None and patch.quantity > 0:
            changes["quantity"] = patch.quantity
        if patch.is_present("expected_delivery_date") and patch.expected_delivery_date is not None:
            changes["expected_delivery_date"] = _as_utc(patch.expected_delivery_date)
        if patch.is_present("additional_description"):
            if patch.additional_description is None:
                changes["additional_description"] = None
            elif patch.additional_description != "":
                changes["additional_description"] = patch.additional_description

        changes = {k: v for k, v in changes.items() if getattr(order, k) != v}
        if not changes:
            return order

        updated = order.model_copy(update=changes)
        await OrderStore.update(updated)
        logger.info("Customer %s edited order %s: %s", customer_id, order_id, ", ".join(sorted(changes)))
        return updated

    @classmethod
    async def advance_status(cls, order_id: uuid.UUID, new_status: OrderStatus) -> OrderRead:
        """Move an order along the state machine.

        Used by operator tooling, not by customers.  Raises
        ``NotFoundError`` for an unknown order and ``InvalidStateError``
        if ``ALLOWED_TRANSITIONS`` does not permit the move.
        """
        order = await OrderStore.get(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found.")
        if new_status not in ALLOWED_TRANSITIONS[order.status]:
            raise InvalidStateError(
                f"Order cannot move from {order.status.value} to {new_status.value}."
            )
        updated = order.model_copy(update={"status": new_status})
        await OrderStore.update(updated)
        logger.info("Order %s moved from %s to %s", order_id, order.status.value, new_status.value)
        return updated
