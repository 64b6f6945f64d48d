"""EditReview — the author changes a review, which returns it to moderation."""

import json

from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.reviews.queries import review_for_author
from storefront.reviews.rating import RatingAggregator
from storefront.reviews.review import Review


@storefront.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(min_value=1, max_value=5)
    title = String(max_length=100)
    content = Text()
    pros = Text()  # JSON array of strings
    cons = Text()  # JSON array of strings
    images = Text()  # JSON array of {url, caption}


@storefront.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        review = review_for_author(command.review_id, command.user_id)

        changes = {}
        for name in ("rating", "title", "content"):
            value = getattr(command, name)
            if value is not None:
                changes[name] = value
        for name in ("pros", "cons", "images"):
            value = getattr(command, name)
            if value is not None:
                changes[name] = json.loads(value)

        review.edit(**changes)
        current_domain.repository_for(Review).add(review)
        RatingAggregator().recompute(review.product_id, changed=review)
        return str(review.id)
