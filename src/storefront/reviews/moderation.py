"""ModerateReview — an admin approves or rejects a review."""

from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.domain import logger, storefront
from storefront.reviews.queries import get_review
from storefront.reviews.rating import RatingAggregator
from storefront.reviews.review import Review, ReviewStatus


@storefront.command(part_of="Review")
class ModerateReview:
    review_id = Identifier(required=True)
    status = String(required=True, choices=ReviewStatus)
    moderated_by = String(required=True, max_length=100)
    admin_comment = Text()


@storefront.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(ModerateReview)
    def moderate_review(self, command):
        review = get_review(command.review_id)
        review.moderate(
            command.status,
            moderated_by=command.moderated_by,
            admin_comment=command.admin_comment,
        )
        current_domain.repository_for(Review).add(review)
        RatingAggregator().recompute(review.product_id, changed=review)

        logger.info(
            "Review moderated",
            review_id=str(review.id),
            status=review.status,
            moderated_by=command.moderated_by,
        )
        return review.status
