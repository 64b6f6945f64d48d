"""Shopping Cart aggregate (CQRS) — one cart per user, created on first add.

Each line keeps the price it was added at. The cached summary is recomputed
by every mutator, so whatever is persisted always agrees with its items and
coupon. A zero quantity never survives: updating a line to 0 removes it.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
    CouponAppliedToCart,
    CouponRemovedFromCart,
)
from storefront.domain import storefront
from storefront.errors import InsufficientStockError, ItemNotFoundError
from storefront.shared.pricing import Summary, compute_summary, coupon_is_active


@storefront.value_object(part_of="ShoppingCart")
class PriceSnapshot:
    """Product price at the moment the line was added."""

    base_price = Float(required=True, min_value=0.0)
    discount_percent = Float(default=0.0, min_value=0.0, max_value=100.0)
    final_price = Float(required=True, min_value=0.0)


@storefront.value_object(part_of="ShoppingCart")
class AppliedCoupon:
    code = String(required=True, max_length=50)
    discount_percentage = Float(required=True, min_value=0.0, max_value=100.0)
    expires_at = DateTime()


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    selected_specs = Text()  # JSON object, e.g. {"size": "M", "color": "red"}
    price = ValueObject(PriceSnapshot, required=True)
    added_at = DateTime()

    @property
    def specs(self) -> dict:
        return json.loads(self.selected_specs) if self.selected_specs else {}


@storefront.aggregate
class ShoppingCart:
    user_id = Identifier(identifier=True, required=True)
    items = HasMany(CartItem)
    summary = ValueObject(Summary)
    coupon = ValueObject(AppliedCoupon)
    item_count = Integer(default=0)
    created_at = DateTime()
    last_updated = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            summary=Summary(),
            item_count=0,
            created_at=now,
            last_updated=now,
        )

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def item_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    @property
    def is_empty(self) -> bool:
        return not self.items

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity, specs=None):
        """Add ``quantity`` of ``product`` or top up the existing line.

        Specs of an existing line are shallow-merged, new keys win.
        """
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.item_for(product.id)
        line_quantity = quantity + (existing.quantity if existing else 0)
        if not product.is_available(line_quantity):
            raise InsufficientStockError(product.id, available=product.inventory.quantity, requested=line_quantity)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = line_quantity
            if specs:
                existing.selected_specs = json.dumps({**existing.specs, **specs})
            final_price = existing.price.final_price
        else:
            snapshot = PriceSnapshot(
                base_price=product.price.base_price,
                discount_percent=product.price.discount_percent or 0.0,
                final_price=product.price.final_price,
            )
            self.add_items(
                CartItem(
                    product_id=product.id,
                    quantity=quantity,
                    selected_specs=json.dumps(specs) if specs else None,
                    price=snapshot,
                    added_at=now,
                )
            )
            final_price = snapshot.final_price

        self.recompute_summary(now)

        self.raise_(
            CartItemAdded(
                user_id=str(self.user_id),
                product_id=str(product.id),
                quantity=quantity,
                line_quantity=line_quantity,
                final_price=final_price,
            )
        )

    def update_item_quantity(self, product_id, quantity, product=None, specs=None):
        """Overwrite a line's quantity; 0 removes the line.

        ``product`` carries live stock and is required for a non-zero quantity.
        """
        item = self.item_for(product_id)
        if item is None:
            raise ItemNotFoundError(product_id)
        if quantity is None or quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

        if quantity == 0:
            self.remove_item(product_id)
            return

        if product is None or not product.is_available(quantity):
            available = product.inventory.quantity if product else 0
            raise InsufficientStockError(product_id, available=available, requested=quantity)

        previous_quantity = item.quantity
        item.quantity = quantity
        if specs:
            item.selected_specs = json.dumps({**item.specs, **specs})
        self.recompute_summary()

        self.raise_(
            CartItemQuantityUpdated(
                user_id=str(self.user_id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove the line for ``product_id``. Removing an absent line is a no-op."""
        item = self.item_for(product_id)
        if item is None:
            return

        self.remove_items(item)
        self.recompute_summary()

        self.raise_(CartItemRemoved(user_id=str(self.user_id), product_id=str(product_id)))

    def clear(self):
        """Empty the cart and drop any coupon. The cart itself is kept."""
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.coupon = None

        now = datetime.now(UTC)
        self.recompute_summary(now)

        self.raise_(CartCleared(user_id=str(self.user_id), items_removed=removed, cleared_at=now))

    # -------------------------------------------------------------------
    # Coupons
    # -------------------------------------------------------------------
    def apply_coupon(self, code, discount_percentage, expires_at=None):
        if not coupon_is_active(expires_at):
            raise ValidationError({"coupon": [f"Coupon {code} has expired"]})

        self.coupon = AppliedCoupon(code=code, discount_percentage=discount_percentage, expires_at=expires_at)
        self.recompute_summary()

        self.raise_(
            CouponAppliedToCart(
                user_id=str(self.user_id),
                code=code,
                discount_percentage=discount_percentage,
            )
        )

    def remove_coupon(self):
        if self.coupon is None:
            return

        code = self.coupon.code
        self.coupon = None
        self.recompute_summary()

        self.raise_(CouponRemovedFromCart(user_id=str(self.user_id), code=code))

    def active_coupon_percent(self, now=None) -> float:
        if self.coupon and coupon_is_active(self.coupon.expires_at, now):
            return self.coupon.discount_percentage
        return 0.0

    # -------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------
    def recompute_summary(self, now=None):
        """Derive the summary and item count from the current lines and coupon."""
        now = now or datetime.now(UTC)
        self.summary = compute_summary(
            [(i.price.base_price, i.price.discount_percent, i.quantity) for i in self.items],
            coupon_percent=self.active_coupon_percent(now),
        )
        self.item_count = sum(i.quantity for i in self.items)
        self.last_updated = now
