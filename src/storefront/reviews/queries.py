"""Read-side helpers for reviews."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import ForbiddenError, ReviewNotFoundError
from storefront.reviews.review import Review, ReviewStatus

DEFAULT_PAGE_SIZE = 10


def get_review(review_id) -> Review:
    try:
        return current_domain.repository_for(Review).get(review_id)
    except ObjectNotFoundError:
        raise ReviewNotFoundError(review_id) from None


def review_for_author(review_id, user_id, is_admin=False) -> Review:
    review = get_review(review_id)
    if not is_admin and not review.is_written_by(user_id):
        raise ForbiddenError({"review_id": [f"Review {review_id} was written by another user"]})
    return review


def _page(filters, page, limit) -> dict:
    page = max(int(page or 1), 1)
    limit = max(int(limit or DEFAULT_PAGE_SIZE), 1)
    results = (
        current_domain.repository_for(Review)
        ._dao.query.filter(**filters)
        .order_by("-created_at")
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "reviews": results.items,
        "total": results.total,
        "page": page,
        "pages": (results.total + limit - 1) // limit,
    }


def list_product_reviews(product_id, rating=None, page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    """Approved reviews of a product, newest first, optionally only one star rating."""
    filters = {"product_id": str(product_id), "status": ReviewStatus.APPROVED.value}
    if rating:
        filters["rating_score"] = int(rating)
    return _page(filters, page, limit)


def list_reviews_by_status(status=ReviewStatus.PENDING.value, page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    return _page({"status": ReviewStatus(status).value}, page, limit)


def list_user_reviews(user_id, page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    return _page({"user_id": str(user_id)}, page, limit)
