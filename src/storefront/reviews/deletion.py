"""DeleteReview — the author (or an admin) removes a review for good."""

from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.domain import logger, storefront
from storefront.reviews.queries import review_for_author
from storefront.reviews.rating import RatingAggregator
from storefront.reviews.review import Review


@storefront.command(part_of="Review")
class DeleteReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    is_admin = Boolean(default=False)


@storefront.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        review = review_for_author(command.review_id, command.user_id, is_admin=command.is_admin)
        product_id = review.product_id

        current_domain.repository_for(Review)._dao.delete(review)
        RatingAggregator().recompute(product_id, removed_id=review.id)

        logger.info("Review deleted", review_id=str(review.id), product_id=str(product_id))
