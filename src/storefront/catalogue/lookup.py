"""Product lookup service: fetch by id and slug uniqueness checks."""

import re

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.errors import ProductNotFoundError

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    slug = _NON_SLUG_CHARS.sub("-", (text or "").strip().lower()).strip("-")
    return slug or "item"


class ProductLookup:
    def __init__(self):
        self.repository = current_domain.repository_for(Product)

    def get_product(self, product_id) -> Product:
        try:
            return self.repository.get(product_id)
        except ObjectNotFoundError:
            raise ProductNotFoundError(product_id) from None

    def find_product(self, product_id) -> Product | None:
        try:
            return self.repository.get(product_id)
        except ObjectNotFoundError:
            return None

    def exists_with_slug(self, slug, exclude_id=None) -> bool:
        matches = self.repository._dao.query.filter(slug=slug).all().items
        return any(str(p.id) != str(exclude_id) for p in matches)

    def unique_slug(self, name, exclude_id=None) -> str:
        """Slug for ``name``, suffixed ``-1``, ``-2``... until unused."""
        base = slugify(name)
        slug = base
        counter = 1
        while self.exists_with_slug(slug, exclude_id=exclude_id):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def count_in_category(self, category_id, exclude_id=None) -> int:
        query = self.repository._dao.query.filter(category_id=str(category_id))
        if exclude_id is not None:
            query = query.exclude(id=str(exclude_id))
        return query.limit(None).all().total
