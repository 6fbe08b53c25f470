"""
Persistence for orders.

Every customer-facing read filters on ``customer_id`` and ``id``
together, so an order owned by someone else looks exactly like one
that does not exist.  ``customer_id``, ``service_id`` and
``date_created`` are written once on insert and never updated.
Concurrent updates of the same row are last-writer-wins.
"""

import sqlite3
import uuid
from decimal import Decimal
from typing import List, Optional

from laundry_api.app.core.db import from_db_timestamp, get_connection, to_db_timestamp
from laundry_api.app.core.exceptions import NotFoundError
from laundry_api.app.schemas.order import OrderRead, OrderStatus, OrderSummary

_ORDER_COLUMNS = (
    "o.id, o.customer_id, o.service_id, o.quantity, o.expected_delivery_date, "
    "o.additional_description, o.status, o.date_created"
)


def _row_to_order(row: sqlite3.Row) -> OrderRead:
    return OrderRead(
        id=row["id"],
        customer_id=row["customer_id"],
        service_id=row["service_id"],
        quantity=row["quantity"],
        expected_delivery_date=from_db_timestamp(row["expected_delivery_date"]),
        additional_description=row["additional_description"],
        status=OrderStatus(row["status"]),
        date_created=from_db_timestamp(row["date_created"]),
    )


class OrderStore:
    """Order persistence on top of ``core.db``."""

    @classmethod
    async def create(cls, order: OrderRead) -> OrderRead:
        """Insert a new order row and return the order."""
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO orders (id, customer_id, service_id, quantity, expected_delivery_date,
                                    additional_description, status, date_created)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(order.id),
                    str(order.customer_id),
                    str(order.service_id),
                    order.quantity,
                    to_db_timestamp(order.expected_delivery_date),
                    order.additional_description,
                    order.status.value,
                    to_db_timestamp(order.date_created),
                ),
            )
            conn.commit()
            return order
        finally:
            conn.close()

    @classmethod
    async def get_for_customer(cls, customer_id: uuid.UUID, order_id: uuid.UUID) -> Optional[OrderRead]:
        """Return the order if it exists and belongs to ``customer_id``."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_ORDER_COLUMNS} FROM orders o WHERE o.customer_id = ? AND o.id = ?",
                (str(customer_id), str(order_id)),
            ).fetchone()
            return _row_to_order(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def get(cls, order_id: uuid.UUID) -> Optional[OrderRead]:
        """Return an order regardless of owner.  For operator tooling only."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_ORDER_COLUMNS} FROM orders o WHERE o.id = ?",
                (str(order_id),),
            ).fetchone()
            return _row_to_order(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def list_summaries_for_customer(cls, customer_id: uuid.UUID) -> List[OrderSummary]:
        """Return the customer's orders joined with their services, newest first.

        Orders created within the same instant come out in reverse
        insertion order.
        """
        conn = get_connection()
        try:
            rows = conn.execute(
                f"""
                SELECT {_ORDER_COLUMNS}, s.service_name, s.material_type, s.price
                FROM orders o
                JOIN services s ON s.id = o.service_id
                WHERE o.customer_id = ?
                ORDER BY o.date_created DESC, o.rowid DESC
                """,
                (str(customer_id),),
            ).fetchall()
            summaries: List[OrderSummary] = []
            for row in rows:
                order = _row_to_order(row)
                summaries.append(
                    OrderSummary(
                        **order.model_dump(),
                        service_name=row["service_name"],
                        material_type=row["material_type"],
                        price=Decimal(row["price"]),
                    )
                )
            return summaries
        finally:
            conn.close()

    @classmethod
    async def update(cls, order: OrderRead) -> OrderRead:
        """Write the mutable fields of ``order`` back to its row.

        The row is matched on both id and owner.  Raises
        ``NotFoundError`` if no row matched, e.g. because it was removed
        in the meantime.
        """
        conn = get_connection()
        try:
            cursor = conn.execute(
                """
                UPDATE orders
                SET quantity = ?, expected_delivery_date = ?, additional_description = ?, status = ?
                WHERE id = ? AND customer_id = ?
                """,
                (
                    order.quantity,
                    to_db_timestamp(order.expected_delivery_date),
                    order.additional_description,
                    order.status.value,
                    str(order.id),
                    str(order.customer_id),
                ),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Order with ID {order.id} not found for this customer.")
            conn.commit()
            return order
        finally:
            conn.close()
