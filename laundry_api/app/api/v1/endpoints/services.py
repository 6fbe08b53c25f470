"""
Catalog endpoints for API v1.

Lists the laundry services on offer and fetches a single one.  These
routes do not need a customer identity.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, status

from laundry_api.app.core.exceptions import NotFoundError, not_found_if_empty
from laundry_api.app.schemas.service import ServiceRead
from laundry_api.app.services.catalog_service import CatalogService

router = APIRouter()


@router.get("/Services", response_model=List[ServiceRead])
async def list_services() -> List[ServiceRead]:
    """Return all services.

    Responds with 404 when the catalog is empty, unless the empty-listing
    policy is switched off.
    """
    services = await CatalogService.list_services()
    try:
        return list(not_found_if_empty(services, "No services available."))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


@router.get("/Services/{service_id}", response_model=ServiceRead)
async def get_service(
    service_id: UUID = Path(..., description="ID of the service"),
) -> ServiceRead:
    service = await CatalogService.get_service(service_id)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Service with ID {service_id} not found.",
        )
    return service
