"""Back-office dashboard: headline counts and the latest orders."""

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.identity.queries import count_users
from storefront.identity.user import Role
from storefront.order.order import Order
from storefront.order.queries import list_orders

RECENT_ORDERS = 5


def _count(aggregate_cls) -> int:
    return current_domain.repository_for(aggregate_cls)._dao.query.limit(None).all().total


def dashboard_stats(recent=RECENT_ORDERS) -> dict:
    return {
        "statistics": {
            "users": count_users(role=Role.USER.value),
            "orders": _count(Order),
            "products": _count(Product),
        },
        "recent_orders": list_orders(page=1, limit=recent)["orders"],
    }
