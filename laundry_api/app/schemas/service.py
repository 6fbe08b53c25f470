"""
Pydantic models for the service catalog.

Services are maintained outside this API and are read-only here.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import ConfigDict, Field

from .common import APIModel


class ServiceRead(APIModel):
    """A laundry offering as listed in the catalog."""

    id: UUID
    service_name: str = Field(..., examples=["Dry cleaning"])
    material_type: str = Field(..., examples=["Wool"])
    price: Decimal = Field(..., ge=0, examples=["12.50"])

    model_config = ConfigDict(frozen=True)
