"""Keeps ``Category.product_count`` in step with the products filed under it.

Runs after the product change has been committed, so the count is taken from
the repository instead of being incremented blindly.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.catalogue.category import Category
from storefront.catalogue.events import ProductCreated, ProductRecategorized
from storefront.catalogue.lookup import ProductLookup
from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


def refresh_product_count(category_id, exclude_product_id=None):
    """Recount products in ``category_id``; a deleted product can be excluded explicitly."""
    if not category_id:
        return

    repo = current_domain.repository_for(Category)
    try:
        category = repo.get(category_id)
    except ObjectNotFoundError:
        logger.warning("Product filed under unknown category", category_id=str(category_id))
        return

    count = ProductLookup().count_in_category(category_id, exclude_id=exclude_product_id)
    category.set_product_count(count)
    repo.add(category)

    logger.info("Category product count refreshed", category_id=str(category_id), product_count=count)


@storefront.event_handler(part_of=Product)
class CategoryProductCountHandler:
    @handle(ProductCreated)
    def on_product_created(self, event: ProductCreated) -> None:
        refresh_product_count(event.category_id)

    @handle(ProductRecategorized)
    def on_product_recategorized(self, event: ProductRecategorized) -> None:
        refresh_product_count(event.previous_category_id)
        refresh_product_count(event.new_category_id)
