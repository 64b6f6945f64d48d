"""Read-side helpers for orders: ownership-checked loads and paginated listings."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import ForbiddenError, OrderNotFoundError
from storefront.order.order import Order, OrderStatus

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def get_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFoundError(order_id) from None


def order_for_user(order_id, user_id, is_admin=False) -> Order:
    """Load an order the caller may act on; admins may act on any order."""
    order = get_order(order_id)
    if not is_admin and not order.is_owned_by(user_id):
        raise ForbiddenError({"order_id": [f"Order {order_id} does not belong to you"]})
    return order


def list_orders(user_id=None, status=None, page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    """Newest-first page of orders, optionally for one user and/or one status."""
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)

    filters = {}
    if user_id is not None:
        filters["user_id"] = str(user_id)
    if status:
        filters["status"] = OrderStatus(status).value

    query = current_domain.repository_for(Order)._dao.query
    if filters:
        query = query.filter(**filters)
    results = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()

    return {
        "orders": results.items,
        "total": results.total,
        "page": page,
        "pages": (results.total + limit - 1) // limit,
    }


def delivered_order_for(user_id, product_id) -> Order | None:
    """The user's first delivered order that contains ``product_id``, if any."""
    delivered = (
        current_domain.repository_for(Order)
        ._dao.query.filter(user_id=str(user_id), status=OrderStatus.DELIVERED.value)
        .limit(None)
        .all()
        .items
    )
    for order in delivered:
        if any(str(item.product_id) == str(product_id) for item in order.items):
            return order
    return None
