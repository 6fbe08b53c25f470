"""
Order endpoints for API v1.

Every route here is scoped to the customer identified by the request
header (see ``core.security``).  The ``OrderService`` performs the
validation and state checks; handlers only map its errors to HTTP
status codes:

* ``InvalidInputError``, ``InvalidStateError`` -> 400
* ``NotFoundError`` -> 404
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response, status

from laundry_api.app.core.exceptions import InvalidInputError, InvalidStateError, NotFoundError
from laundry_api.app.core.security import get_current_customer_id
from laundry_api.app.schemas.order import (
    CancelConfirmation,
    OrderCreate,
    OrderRead,
    OrderStatusRead,
    OrderSummary,
    OrderUpdate,
)
from laundry_api.app.services.order_service import OrderService

router = APIRouter()


@router.post(
    "/PlaceOrder",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
async def place_order(
    order: OrderCreate,
    request: Request,
    response: Response,
    customer_id: UUID = Depends(get_current_customer_id),
) -> OrderRead:
    """Place an order for the calling customer.

    The new order starts as ``Pending``.  Returns 400 for missing or
    invalid fields (including a delivery date that is not in the
    future) and 404 if the referenced service does not exist.
    """
    try:
        created = await OrderService.place_order(customer_id, order)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    response.headers["Location"] = str(request.url_for("get_order_by_id", order_id=created.id))
    return created


@router.get("/Orders", response_model=List[OrderSummary])
async def list_orders(
    customer_id: UUID = Depends(get_current_customer_id),
) -> List[OrderSummary]:
    """List the caller's orders with service details, most recent first."""
    try:
        return await OrderService.list_orders(customer_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


@router.get("/Orders/{order_id}/Status", response_model=OrderStatusRead)
async def get_order_status(
    order_id: UUID = Path(..., description="ID of the order"),
    customer_id: UUID = Depends(get_current_customer_id),
) -> OrderStatusRead:
    try:
        return await OrderService.get_order_status(customer_id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


@router.get("/Orders/{order_id}", response_model=OrderRead, name="get_order_by_id")
async def get_order(
    order_id: UUID = Path(..., description="ID of the order"),
    customer_id: UUID = Depends(get_current_customer_id),
) -> OrderRead:
    try:
        return await OrderService.get_order(customer_id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


@router.post("/Orders/{order_id}/Cancel", response_model=CancelConfirmation)
async def cancel_order(
    order_id: UUID = Path(..., description="ID of the order"),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CancelConfirmation:
    """Cancel an order that is not yet completed or cancelled."""
    try:
        return await OrderService.cancel_order(customer_id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e


@router.put("/Orders/{order_id}", response_model=OrderRead)
async def edit_order(
    patch: OrderUpdate,
    order_id: UUID = Path(..., description="ID of the order"),
    customer_id: UUID = Depends(get_current_customer_id),
) -> OrderRead:
    """Edit quantity, delivery date or description of an open order.

    Fields that are omitted, zero or empty keep their current value;
    see ``OrderUpdate`` for details.
    """
    try:
        return await OrderService.edit_order(customer_id, order_id, patch)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except (InvalidInputError, InvalidStateError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
