"""Product aggregate root with price, inventory and rating value objects.

Inventory is only ever changed through ``adjust_stock`` (driven by the
inventory ledger); the rating summary only by the review rating aggregator.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.catalogue.events import (
    ProductCreated,
    ProductDetailsUpdated,
    ProductRecategorized,
    ProductRepriced,
    StockAdjusted,
)
from storefront.domain import storefront
from storefront.errors import InsufficientStockError
from storefront.shared.pricing import DEFAULT_CURRENCY, final_price, unit_discount

_UNSET = object()


@storefront.value_object(part_of="Product")
class Price:
    """Current list price. Carts and orders copy it, never reference it."""

    base_price: Float(required=True, min_value=0.0)
    discount_percent: Float(default=0.0, min_value=0.0, max_value=100.0)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)

    @property
    def final_price(self) -> float:
        return final_price(self.base_price, self.discount_percent)

    @property
    def unit_discount(self) -> float:
        return unit_discount(self.base_price, self.discount_percent)


@storefront.value_object(part_of="Product")
class Inventory:
    quantity: Integer(default=0, min_value=0)
    in_stock: Boolean(default=False)
    reserved_quantity: Integer(default=0, min_value=0)

    @invariant.post
    def in_stock_tracks_quantity(self):
        if self.in_stock != ((self.quantity or 0) > 0):
            raise ValidationError({"in_stock": ["In-stock flag must match whether quantity is above zero"]})


@storefront.value_object(part_of="Product")
class RatingSummary:
    """Aggregate of approved review ratings."""

    average: Float(default=0.0, min_value=0.0, max_value=5.0)
    count: Integer(default=0, min_value=0)
    distribution: Text()  # JSON: count of 1..5 star reviews, index 0 is one star

    @property
    def buckets(self) -> list[int]:
        return json.loads(self.distribution) if self.distribution else [0, 0, 0, 0, 0]


def empty_rating() -> RatingSummary:
    return RatingSummary(average=0.0, count=0, distribution=json.dumps([0, 0, 0, 0, 0]))


@storefront.aggregate
class Product:
    name: String(required=True, max_length=200)
    slug: String(required=True, max_length=220)
    brand: String(max_length=100)
    description: Text()
    category_id: Identifier()
    specifications: Text()  # JSON object of attribute name to value
    price: ValueObject(Price, required=True)
    inventory: ValueObject(Inventory)
    rating: ValueObject(RatingSummary)
    is_published: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        if self.slug and (self.slug != self.slug.lower() or " " in self.slug):
            raise ValidationError({"slug": ["Slug must be lowercase without spaces"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        slug,
        base_price,
        discount_percent=0.0,
        quantity=0,
        brand=None,
        description=None,
        category_id=None,
        specifications=None,
        currency=DEFAULT_CURRENCY,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug,
            brand=brand,
            description=description,
            category_id=category_id,
            specifications=json.dumps(specifications) if specifications else None,
            price=Price(base_price=base_price, discount_percent=discount_percent or 0.0, currency=currency),
            inventory=Inventory(quantity=quantity, in_stock=quantity > 0, reserved_quantity=0),
            rating=empty_rating(),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                name=name,
                slug=slug,
                category_id=str(category_id) if category_id else None,
                base_price=base_price,
                quantity=quantity,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------
    def is_available(self, requested_quantity) -> bool:
        return bool(self.inventory.in_stock) and self.inventory.quantity >= requested_quantity

    def adjust_stock(self, delta):
        """Apply ``quantity += delta``. Rejects the change outright if it would go negative."""
        previous = self.inventory.quantity
        new_quantity = previous + delta
        if new_quantity < 0:
            raise InsufficientStockError(self.id, available=previous, requested=-delta)

        reserved = self.inventory.reserved_quantity or 0
        if delta < 0:
            reserved -= min(reserved, -delta)

        now = datetime.now(UTC)
        self.inventory = Inventory(quantity=new_quantity, in_stock=new_quantity > 0, reserved_quantity=reserved)
        self.updated_at = now

        self.raise_(
            StockAdjusted(
                product_id=str(self.id),
                delta=delta,
                previous_quantity=previous,
                new_quantity=new_quantity,
                adjusted_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Details and pricing
    # -------------------------------------------------------------------
    def update_details(self, name=_UNSET, brand=_UNSET, description=_UNSET, specifications=_UNSET):
        if name is not _UNSET:
            self.name = name
        if brand is not _UNSET:
            self.brand = brand
        if description is not _UNSET:
            self.description = description
        if specifications is not _UNSET:
            self.specifications = json.dumps(specifications) if specifications else None

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                name=self.name,
                brand=self.brand,
                updated_at=now,
            )
        )

    def reprice(self, base_price=None, discount_percent=None):
        previous_final = self.price.final_price
        self.price = Price(
            base_price=self.price.base_price if base_price is None else base_price,
            discount_percent=self.price.discount_percent if discount_percent is None else discount_percent,
            currency=self.price.currency,
        )
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductRepriced(
                product_id=str(self.id),
                previous_final_price=previous_final,
                new_final_price=self.price.final_price,
                repriced_at=now,
            )
        )

    def recategorize(self, category_id):
        previous = self.category_id
        if str(previous or "") == str(category_id or ""):
            return
        self.category_id = category_id
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductRecategorized(
                product_id=str(self.id),
                previous_category_id=str(previous) if previous else None,
                new_category_id=str(category_id) if category_id else None,
            )
        )

    # -------------------------------------------------------------------
    # Rating
    # -------------------------------------------------------------------
    def update_rating(self, average, count, distribution):
        self.rating = RatingSummary(average=average, count=count, distribution=json.dumps(distribution))
        self.updated_at = datetime.now(UTC)
