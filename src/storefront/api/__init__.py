"""Storefront HTTP API package."""

from storefront.api.admin import admin_router
from storefront.api.auth import auth_router
from storefront.api.cart import cart_router, coupon_router
from storefront.api.catalogue import category_router, product_router
from storefront.api.errors import register_error_handlers
from storefront.api.orders import order_router
from storefront.api.reviews import review_router
from storefront.api.users import user_router
from storefront.api.wishlist import wishlist_router

ROUTERS = [
    product_router,
    category_router,
    cart_router,
    coupon_router,
    order_router,
    review_router,
    wishlist_router,
    auth_router,
    user_router,
    admin_router,
]

__all__ = ["ROUTERS", "register_error_handlers"]
