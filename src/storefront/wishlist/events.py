"""Domain events for the Wishlist aggregate."""

from protean.fields import Boolean, DateTime, Identifier

from storefront.domain import storefront


@storefront.event(part_of="Wishlist")
class ProductWishlisted:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    added_at = DateTime(required=True)


@storefront.event(part_of="Wishlist")
class ProductUnwishlisted:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.event(part_of="Wishlist")
class WishlistCleared:
    __version__ = 1

    user_id = Identifier(required=True)


@storefront.event(part_of="Wishlist")
class WishlistNotificationsUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    notify_price_drops = Boolean(required=True)
    notify_back_in_stock = Boolean(required=True)
