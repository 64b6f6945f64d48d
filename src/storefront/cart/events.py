"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)
    final_price = Float()


@storefront.event(part_of="ShoppingCart")
class CartItemQuantityUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    __version__ = 1

    user_id = Identifier(required=True)
    items_removed = Integer(default=0)
    cleared_at = DateTime(required=True)


@storefront.event(part_of="ShoppingCart")
class CouponAppliedToCart:
    __version__ = 1

    user_id = Identifier(required=True)
    code = String(required=True)
    discount_percentage = Float(required=True)


@storefront.event(part_of="ShoppingCart")
class CouponRemovedFromCart:
    __version__ = 1

    user_id = Identifier(required=True)
    code = String(required=True)
