"""Storefront domain — catalogue, carts, orders, reviews, wishlists and sign-up.

Everything lives in one Protean domain so that order placement, stock
movements and cart clearing share a single unit of work.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
