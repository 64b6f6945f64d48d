"""SubmitReview — a customer reviews a product from one of their delivered orders.

One review per user per product is enforced here, with a repository query,
since the check spans review instances.
"""

import json

from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.catalogue.lookup import ProductLookup
from storefront.domain import storefront
from storefront.errors import DuplicateReviewError, NotPurchasedError
from storefront.order.queries import delivered_order_for
from storefront.reviews.rating import RatingAggregator
from storefront.reviews.review import Review


def existing_review(user_id, product_id) -> Review | None:
    matches = (
        current_domain.repository_for(Review)
        ._dao.query.filter(user_id=str(user_id), product_id=str(product_id))
        .all()
        .items
    )
    return matches[0] if matches else None


@storefront.command(part_of="Review")
class SubmitReview:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    title = String(required=True, max_length=100)
    content = Text(required=True)
    pros = Text()  # JSON array of strings
    cons = Text()  # JSON array of strings
    images = Text()  # JSON array of {url, caption}
    device_info = String(max_length=255)


@storefront.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        ProductLookup().get_product(command.product_id)

        order = delivered_order_for(command.user_id, command.product_id)
        if order is None:
            raise NotPurchasedError(command.product_id)
        if existing_review(command.user_id, command.product_id) is not None:
            raise DuplicateReviewError(command.product_id)

        review = Review.submit(
            user_id=command.user_id,
            product_id=command.product_id,
            order_id=order.id,
            rating=command.rating,
            title=command.title,
            content=command.content,
            pros=json.loads(command.pros) if command.pros else None,
            cons=json.loads(command.cons) if command.cons else None,
            images=json.loads(command.images) if command.images else None,
            purchase_date=order.delivered_at,
            device_info=command.device_info,
        )
        current_domain.repository_for(Review).add(review)
        RatingAggregator().recompute(command.product_id, changed=review)
        return str(review.id)
