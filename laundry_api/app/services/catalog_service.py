"""
Read access to the service catalog.

The catalog is maintained by a separate back-office process; the API
only lists services and looks them up by id.  ``add_service`` exists
for operator tooling (``manage.py add-service``) and is not routed.
"""

import logging
import sqlite3
import uuid
from decimal import Decimal
from typing import List, Optional

from laundry_api.app.core.db import get_connection
from laundry_api.app.schemas.service import ServiceRead

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for reading laundry offerings."""

    @staticmethod
    def _row_to_service(row: sqlite3.Row) -> ServiceRead:
        return ServiceRead(
            id=row["id"],
            service_name=row["service_name"],
            material_type=row["material_type"],
            price=Decimal(row["price"]),
        )

    @classmethod
    async def list_services(cls) -> List[ServiceRead]:
        """Return every service, ordered by name.

        An empty catalog yields an empty list; whether that is reported
        as "not found" is up to the caller.
        """
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, service_name, material_type, price FROM services ORDER BY service_name, id"
            ).fetchall()
            return [cls._row_to_service(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_service(cls, service_id: uuid.UUID) -> Optional[ServiceRead]:
        """Look up a single service.  Returns ``None`` if there is no such service."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, service_name, material_type, price FROM services WHERE id = ?",
                (str(service_id),),
            ).fetchone()
            return cls._row_to_service(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def add_service(
        cls,
        service_name: str,
        material_type: str,
        price: Decimal,
        service_id: Optional[uuid.UUID] = None,
    ) -> ServiceRead:
        """Insert a catalog entry and return it.

        Raises ``ValueError`` for a blank name or material or a negative
        price.
        """
        if not service_name.strip() or not material_type.strip():
            raise ValueError("Service name and material type are required")
        if price < 0:
            raise ValueError("Price must not be negative")
        service = ServiceRead(
            id=service_id or uuid.uuid4(),
            service_name=service_name.strip(),
            material_type=material_type.strip(),
            price=price,
        )
        conn = get_connection()
        try:
            conn.execute(
                "INSERT INTO services (id, service_name, material_type, price) VALUES (?, ?, ?, ?)",
                (str(service.id), service.service_name, service.material_type, str(service.price)),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("Service %s (%s) added to the catalog", service.id, service.service_name)
        return service
