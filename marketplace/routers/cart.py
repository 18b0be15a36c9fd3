"""Cart API router."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from marketplace.dependencies import get_cart_service, get_current_user_id
from marketplace.errors import ValidationError
from marketplace.schemas import (
    AddToCartRequest,
    CartItem,
    CartItemWithProduct,
    CartSummary,
    MessageResponse,
    UpdateCartItemRequest,
)
from marketplace.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=List[CartItemWithProduct])
async def get_cart(
    user_id: str = Depends(get_current_user_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """Get the user's cart rows, each with its product."""
    return cart_service.items_for_user(user_id)


@router.get("/summary", response_model=CartSummary)
async def get_cart_summary(
    user_id: str = Depends(get_current_user_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """Get the user's cart with item count and price total."""
    return cart_service.cart_summary(user_id)


@router.post("", response_model=CartItem, status_code=201)
async def add_to_cart(
    request: AddToCartRequest,
    user_id: str = Depends(get_current_user_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """Add item to cart."""
    try:
        return cart_service.add_item(user_id, request.product_id, request.quantity)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"message": "Invalid cart item data", "errors": e.errors})


@router.put("/{item_id}", response_model=CartItem)
async def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    cart_service: CartService = Depends(get_cart_service)
):
    """Change the quantity of a cart row; quantities below one are rejected."""
    try:
        item = cart_service.update_item(item_id, request.quantity)
    except ValidationError as e:
        return JSONResponse(status_code=400, content=e.to_dict())

    if item is None:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return item


@router.delete("/{item_id}", response_model=MessageResponse)
async def remove_cart_item(
    item_id: str,
    cart_service: CartService = Depends(get_cart_service)
):
    """Remove a cart row."""
    if not cart_service.remove_item(item_id):
        raise HTTPException(status_code=404, detail="Cart item not found")
    return {"message": "Item removed from cart"}


@router.delete("", response_model=MessageResponse)
async def clear_cart(
    user_id: str = Depends(get_current_user_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """Empty the user's cart."""
    removed = cart_service.clear_cart(user_id)
    return {"message": f"Removed {removed} item(s) from cart"}
