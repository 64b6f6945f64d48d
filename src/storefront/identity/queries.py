"""Read-side helpers for users."""

from protean.utils.globals import current_domain

from storefront.errors import NotFoundError
from storefront.identity.user import Role, User, find_user

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def get_user(user_id) -> User:
    user = find_user(user_id)
    if user is None:
        raise NotFoundError({"user_id": [f"User {user_id} not found"]})
    return user


def list_users(role=None, page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    """Newest-first page of users, optionally of one role."""
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)

    query = current_domain.repository_for(User)._dao.query
    if role:
        query = query.filter(role=Role(role).value)
    results = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()

    return {
        "users": results.items,
        "total": results.total,
        "page": page,
        "pages": (results.total + limit - 1) // limit,
    }


def count_users(role=None) -> int:
    query = current_domain.repository_for(User)._dao.query
    if role:
        query = query.filter(role=Role(role).value)
    return query.limit(None).all().total
