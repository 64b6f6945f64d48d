"""FastAPI endpoints for the caller's shopping cart."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import Principal, current_principal, require_admin
from storefront.api.schemas import (
    AddToCartRequest,
    ApplyCouponRequest,
    CreateCouponRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
)
from storefront.api.serializers import cart_to_dict
from storefront.cart.coupons import ApplyCouponToCart, CreateCoupon, RemoveCouponFromCart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity, cart_for

cart_router = APIRouter(prefix="/cart", tags=["cart"])
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


@cart_router.get("")
async def get_cart(principal: Principal = Depends(current_principal)) -> dict:
    return cart_to_dict(cart_for(principal.user_id))


@cart_router.post("/items")
async def add_cart_item(body: AddToCartRequest, principal: Principal = Depends(current_principal)) -> dict:
    command = AddToCart(
        user_id=principal.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
        selected_specs=json.dumps(body.selected_specs) if body.selected_specs else None,
    )
    current_domain.process(command, asynchronous=False)
    return cart_to_dict(cart_for(principal.user_id))


@cart_router.put("/items/{product_id}")
async def update_cart_item(
    product_id: str,
    body: UpdateCartQuantityRequest,
    principal: Principal = Depends(current_principal),
) -> dict:
    command = UpdateCartQuantity(
        user_id=principal.user_id,
        product_id=product_id,
        quantity=body.quantity,
        selected_specs=json.dumps(body.selected_specs) if body.selected_specs else None,
    )
    current_domain.process(command, asynchronous=False)
    return cart_to_dict(cart_for(principal.user_id))


@cart_router.delete("/items/{product_id}")
async def remove_cart_item(product_id: str, principal: Principal = Depends(current_principal)) -> dict:
    current_domain.process(RemoveFromCart(user_id=principal.user_id, product_id=product_id), asynchronous=False)
    return cart_to_dict(cart_for(principal.user_id))


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(principal: Principal = Depends(current_principal)) -> StatusResponse:
    current_domain.process(ClearCart(user_id=principal.user_id), asynchronous=False)
    return StatusResponse(status="cleared")


@cart_router.post("/coupon")
async def apply_coupon(body: ApplyCouponRequest, principal: Principal = Depends(current_principal)) -> dict:
    current_domain.process(ApplyCouponToCart(user_id=principal.user_id, code=body.code), asynchronous=False)
    return cart_to_dict(cart_for(principal.user_id))


@cart_router.delete("/coupon")
async def remove_coupon(principal: Principal = Depends(current_principal)) -> dict:
    current_domain.process(RemoveCouponFromCart(user_id=principal.user_id), asynchronous=False)
    return cart_to_dict(cart_for(principal.user_id))


@coupon_router.post("", status_code=201, response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def create_coupon(body: CreateCouponRequest) -> StatusResponse:
    command = CreateCoupon(
        code=body.code,
        discount_percentage=body.discount_percentage,
        expires_at=body.expires_at,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="created")
