"""Read-side helpers for products and categories."""

from protean.utils.globals import current_domain
from protean.utils.query import Q

from storefront.catalogue.category import Category, load_category
from storefront.catalogue.product import Product

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
RELATED_PRODUCTS_LIMIT = 4


def list_products(category_id=None, search=None, in_stock=None, page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    """Published products, newest first, filtered by category, name or brand, and stock."""
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)

    query = current_domain.repository_for(Product)._dao.query.filter(is_published=True)
    if category_id:
        query = query.filter(category_id=str(category_id))
    if search and search.strip():
        term = search.strip()
        query = query.filter(Q(name__icontains=term) | Q(brand__icontains=term))
    if in_stock is not None:
        query = query.filter(inventory_in_stock=bool(in_stock))

    results = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
    return {
        "products": results.items,
        "total": results.total,
        "page": page,
        "pages": (results.total + limit - 1) // limit,
    }


def related_products(product: Product, limit=RELATED_PRODUCTS_LIMIT) -> list[Product]:
    """Other published products from the same category."""
    if not product.category_id:
        return []
    return (
        current_domain.repository_for(Product)
        ._dao.query.filter(category_id=str(product.category_id), is_published=True)
        .exclude(id=str(product.id))
        .order_by("-created_at")
        .limit(limit)
        .all()
        .items
    )


def get_category(category_id) -> Category:
    return load_category(category_id)


def list_categories(parent_id=None) -> list[Category]:
    query = current_domain.repository_for(Category)._dao.query
    if parent_id is not None:
        query = query.filter(parent_id=str(parent_id))
    return query.order_by("name").limit(None).all().items

