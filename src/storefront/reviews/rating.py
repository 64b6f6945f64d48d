"""Review-to-rating aggregation onto the product's rating summary.

Called by every review handler right after it stages its change, inside the
same unit of work. The staged review is passed in (or its id, when deleted)
and overrides what the repository returns, so the summary never lags the
change that triggered it.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.catalogue.lookup import ProductLookup
from storefront.catalogue.product import Product
from storefront.reviews.review import Review, ReviewStatus

logger = structlog.get_logger(__name__)


def summarize(ratings) -> tuple[float, int, list[int]]:
    """Average (one decimal), count and 1..5 star distribution of ``ratings``."""
    distribution = [0, 0, 0, 0, 0]
    for score in ratings:
        distribution[score - 1] += 1

    count = sum(distribution)
    if count == 0:
        return 0.0, 0, distribution

    average = sum(star * n for star, n in enumerate(distribution, start=1)) / count
    return round(average, 1), count, distribution


class RatingAggregator:
    def approved_reviews(self, product_id, changed=None, removed_id=None) -> list[Review]:
        reviews = {
            str(r.id): r
            for r in current_domain.repository_for(Review)
            ._dao.query.filter(product_id=str(product_id), status=ReviewStatus.APPROVED.value)
            .limit(None)
            .all()
            .items
        }
        if changed is not None:
            reviews[str(changed.id)] = changed
        if removed_id is not None:
            reviews.pop(str(removed_id), None)
        return [r for r in reviews.values() if r.is_approved]

    def recompute(self, product_id, changed=None, removed_id=None):
        """Rewrite the product's rating summary from its approved reviews."""
        product = ProductLookup().find_product(product_id)
        if product is None:
            logger.warning("Rating not recomputed for missing product", product_id=str(product_id))
            return None

        average, count, distribution = summarize(
            r.rating.score for r in self.approved_reviews(product_id, changed=changed, removed_id=removed_id)
        )
        product.update_rating(average, count, distribution)
        current_domain.repository_for(Product).add(product)

        logger.info("Product rating recomputed", product_id=str(product_id), average=average, count=count)
        return product.rating
