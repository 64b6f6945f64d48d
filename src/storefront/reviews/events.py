"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    rating = Integer(required=True)
    submitted_at = DateTime(required=True)


@storefront.event(part_of="Review")
class ReviewEdited:
    """Content changed; the review is back in the moderation queue."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_status = String(required=True)
    rating = Integer(required=True)
    edited_at = DateTime(required=True)


@storefront.event(part_of="Review")
class ReviewModerated:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    moderated_by = String()
    moderated_at = DateTime(required=True)


@storefront.event(part_of="Review")
class HelpfulVoteToggled:
    __version__ = 1

    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    helpful = String(required=True)  # "added" / "removed"
    helpful_count = Integer(required=True)
