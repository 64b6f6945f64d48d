"""FastAPI endpoints for the caller's wishlist."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import Principal, current_principal
from storefront.api.schemas import StatusResponse, WishlistItemRequest, WishlistNotificationsRequest
from storefront.api.serializers import wishlist_to_dict
from storefront.wishlist.management import (
    AddToWishlist,
    ClearWishlist,
    MoveWishlistItemToCart,
    RemoveFromWishlist,
    UpdateWishlistNotifications,
    wishlist_for,
)

wishlist_router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@wishlist_router.get("")
async def get_wishlist(principal: Principal = Depends(current_principal)) -> dict:
    return wishlist_to_dict(wishlist_for(principal.user_id))


@wishlist_router.post("/items")
async def add_wishlist_item(body: WishlistItemRequest, principal: Principal = Depends(current_principal)) -> dict:
    current_domain.process(AddToWishlist(user_id=principal.user_id, product_id=body.product_id), asynchronous=False)
    return wishlist_to_dict(wishlist_for(principal.user_id))


@wishlist_router.delete("/items/{product_id}")
async def remove_wishlist_item(product_id: str, principal: Principal = Depends(current_principal)) -> dict:
    current_domain.process(RemoveFromWishlist(user_id=principal.user_id, product_id=product_id), asynchronous=False)
    return wishlist_to_dict(wishlist_for(principal.user_id))


@wishlist_router.put("/items/{product_id}/notifications")
async def update_wishlist_notifications(
    product_id: str,
    body: WishlistNotificationsRequest,
    principal: Principal = Depends(current_principal),
) -> dict:
    command = UpdateWishlistNotifications(
        user_id=principal.user_id,
        product_id=product_id,
        price_drops=body.price_drops,
        back_in_stock=body.back_in_stock,
    )
    current_domain.process(command, asynchronous=False)
    return wishlist_to_dict(wishlist_for(principal.user_id))


@wishlist_router.post("/items/{product_id}/move-to-cart", response_model=StatusResponse)
async def move_to_cart(product_id: str, principal: Principal = Depends(current_principal)) -> StatusResponse:
    command = MoveWishlistItemToCart(user_id=principal.user_id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="moved")


@wishlist_router.delete("", response_model=StatusResponse)
async def clear_wishlist(principal: Principal = Depends(current_principal)) -> StatusResponse:
    current_domain.process(ClearWishlist(user_id=principal.user_id), asynchronous=False)
    return StatusResponse(status="cleared")
