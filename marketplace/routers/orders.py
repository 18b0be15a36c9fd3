"""Orders API router."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from marketplace.dependencies import get_current_user_id, get_order_service
from marketplace.errors import ValidationError
from marketplace.schemas import CreateOrderRequest, Order, OrderWithItems
from marketplace.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderWithItems, status_code=201)
async def create_order(
    request: CreateOrderRequest,
    user_id: str = Depends(get_current_user_id),
    order_service: OrderService = Depends(get_order_service)
):
    """Place an order from the current cart; the cart is emptied."""
    try:
        return order_service.place_order(user_id, request.total, request.shipping_address)
    except ValidationError as e:
        return JSONResponse(status_code=400, content=e.to_dict())


@router.get("", response_model=List[Order])
async def get_orders(
    user_id: str = Depends(get_current_user_id),
    order_service: OrderService = Depends(get_order_service)
):
    """Get user's orders."""
    return order_service.list_orders(user_id)


@router.get("/{order_id}", response_model=OrderWithItems)
async def get_order(
    order_id: str,
    order_service: OrderService = Depends(get_order_service)
):
    """Get an order with its line items."""
    order = order_service.get_order(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
