"""
Top-level router for version 1 of the API.

Both domain routers live under the ``/Customer`` namespace used by
existing clients (``/api/Customer/Services``, ``/api/Customer/Orders``).
"""

from fastapi import APIRouter

from .endpoints import orders, services

router = APIRouter(prefix="/Customer")

router.include_router(services.router, tags=["services"])
router.include_router(orders.router, tags=["orders"])
