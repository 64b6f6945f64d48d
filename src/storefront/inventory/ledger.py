"""Inventory ledger — the only path through which product stock changes.

``adjust_stock`` never clamps: a change that would drive quantity below zero
is rejected with ``InsufficientStockError`` and nothing is written. Batches
are validated and applied in memory first and only then handed to the
repository, so a failure on any line leaves every product untouched. Every
save bumps the aggregate version; providers that enforce it reject a stale
concurrent write instead of overwriting it.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.catalogue.lookup import ProductLookup
from storefront.catalogue.product import Product

logger = structlog.get_logger(__name__)


class InventoryLedger:
    def __init__(self, lookup: ProductLookup | None = None):
        self.lookup = lookup or ProductLookup()

    def check_availability(self, product_id, requested_quantity) -> bool:
        """Read-only: ``in_stock and quantity >= requested_quantity``."""
        return self.lookup.get_product(product_id).is_available(requested_quantity)

    def adjust_stock(self, product_id, delta) -> Product:
        """Apply ``quantity += delta`` to one product and persist it."""
        return self.adjust_many([(product_id, delta)])[0]

    def adjust_many(self, adjustments, products=None) -> list[Product]:
        """Apply several ``(product_id, delta)`` adjustments as one batch.

        Args:
            adjustments: iterable of ``(product_id, delta)``; a product may
                appear more than once.
            products: optional ``{product_id: Product}`` of already loaded
                aggregates, so callers that validated stock do not reload.
        """
        loaded = dict(products or {})
        touched = []

        for product_id, delta in adjustments:
            key = str(product_id)
            if key not in loaded:
                loaded[key] = self.lookup.get_product(product_id)
            product = loaded[key]
            product.adjust_stock(delta)
            if product not in touched:
                touched.append(product)

        repo = current_domain.repository_for(Product)
        for product in touched:
            repo.add(product)
            logger.info(
                "Stock adjusted",
                product_id=str(product.id),
                quantity=product.inventory.quantity,
                in_stock=product.inventory.in_stock,
            )

        return touched

    def restock(self, items) -> list[Product]:
        """Return ``(product_id, quantity)`` lines to stock, skipping products deleted since."""
        adjustments = []
        for product_id, quantity in items:
            if self.lookup.find_product(product_id) is None:
                logger.warning("Cannot restock deleted product", product_id=str(product_id), quantity=quantity)
                continue
            adjustments.append((product_id, quantity))
        return self.adjust_many(adjustments)
