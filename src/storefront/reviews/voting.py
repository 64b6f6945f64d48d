"""ToggleHelpfulVote — mark a review helpful, or take the mark back."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.reviews.queries import get_review
from storefront.reviews.review import Review


@storefront.command(part_of="Review")
class ToggleHelpfulVote:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Review)
class ToggleHelpfulVoteHandler:
    @handle(ToggleHelpfulVote)
    def toggle_helpful_vote(self, command):
        review = get_review(command.review_id)
        added = review.toggle_helpful(command.user_id)
        current_domain.repository_for(Review).add(review)
        return {"helpful": added, "helpful_count": review.helpful_count}
