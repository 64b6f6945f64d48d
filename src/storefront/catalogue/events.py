"""Domain events for the Product and Category aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    category_id: Identifier()
    base_price: Float(required=True)
    quantity: Integer(default=0)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String()
    brand: String()
    updated_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductRepriced:
    """Base price or discount changed. Carts and orders keep their snapshots."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_final_price: Float(required=True)
    new_final_price: Float(required=True)
    repriced_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductRecategorized:
    __version__ = 1

    product_id: Identifier(required=True)
    previous_category_id: Identifier()
    new_category_id: Identifier()


@storefront.event(part_of="Product")
class StockAdjusted:
    """Inventory moved through the ledger."""

    __version__ = 1

    product_id: Identifier(required=True)
    delta: Integer(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)
    adjusted_at: DateTime(required=True)


@storefront.event(part_of="Category")
class CategoryCreated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_id: Identifier()


@storefront.event(part_of="Category")
class CategoryUpdated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_id: Identifier()

