"""
Pydantic models for orders.

``OrderCreate`` and ``OrderUpdate`` are request bodies; ``OrderRead``
is the stored order, ``OrderSummary`` the order joined with its
service for listings.  ``OrderRead`` is frozen: the service layer
derives changed orders with ``model_copy`` instead of mutating them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from .common import APIModel

# Largest value SQLite can store in an INTEGER column.
MAX_QUANTITY = 2**63 - 1


class OrderStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


class OrderCreate(APIModel):
    """Schema for placing an order.

    Required fields are checked by ``OrderService.place_order`` so that
    a missing value is reported the same way as an invalid one.  A
    ``customer_id`` in the body is accepted for compatibility and
    ignored: the owner is always the caller identified by the request
    header.
    """

    service_id: Optional[UUID] = None
    quantity: Optional[int] = Field(None, le=MAX_QUANTITY, examples=[3])
    expected_delivery_date: Optional[datetime] = Field(None, examples=["2026-11-01T10:00:00Z"])
    additional_description: Optional[str] = Field(None, examples=["Please use a gentle cycle"])
    customer_id: Optional[UUID] = None


class OrderUpdate(APIModel):
    """Sparse patch for an order.

    Only fields present in the request are considered:

    * ``quantity`` replaces the current value when greater than zero.
    * ``expected_delivery_date`` replaces the current value unless null.
    * ``additional_description`` replaces the current value when
      non-empty; an explicit null clears it.

    Anything else (absent fields, ``0``, ``""``) leaves the order as it is.
    """

    quantity: Optional[int] = Field(None, le=MAX_QUANTITY)
    expected_delivery_date: Optional[datetime] = None
    additional_description: Optional[str] = None

    def is_present(self, field: str) -> bool:
        return field in self.model_fields_set


class OrderRead(APIModel):
    id: UUID
    customer_id: UUID
    service_id: UUID
    quantity: int
    expected_delivery_date: datetime
    additional_description: Optional[str] = None
    status: OrderStatus
    date_created: datetime

    model_config = ConfigDict(frozen=True)


class OrderStatusRead(APIModel):
    order_id: UUID
    status: OrderStatus


class OrderSummary(APIModel):
    """An order together with the name, material and price of its service."""

    id: UUID
    customer_id: UUID
    service_id: UUID
    service_name: str
    material_type: str
    price: Decimal
    quantity: int
    expected_delivery_date: datetime
    additional_description: Optional[str] = None
    status: OrderStatus
    date_created: datetime

    model_config = ConfigDict(frozen=True)


class CancelConfirmation(APIModel):
    message: str = "Order successfully cancelled."
