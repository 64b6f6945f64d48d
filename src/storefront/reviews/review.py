"""Review aggregate (CQRS) — one user's review of one purchased product.

Moderation statuses:
    pending → approved | rejected
    approved ↔ rejected (a moderator may reverse a decision)
    any → pending when the author edits the content

Only approved reviews count towards the product's rating summary.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.reviews.events import HelpfulVoteToggled, ReviewEdited, ReviewModerated, ReviewSubmitted

_UNSET = object()

MAX_IMAGES = 5


class ReviewStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


_MODERATION_TARGETS = {ReviewStatus.APPROVED, ReviewStatus.REJECTED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Review")
class Rating:
    """A star rating from 1 to 5."""

    score = Integer(required=True)

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and (self.score < 1 or self.score > 5):
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})


@storefront.value_object(part_of="Review")
class ReviewMetadata:
    is_edited = Boolean(default=False)
    last_edited_at = DateTime()
    moderated_at = DateTime()
    moderated_by = String(max_length=100)
    purchase_date = DateTime()
    device_info = String(max_length=255)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Review")
class ReviewImage:
    url = String(required=True, max_length=500)
    caption = String(max_length=200)


@storefront.entity(part_of="Review")
class HelpfulVote:
    user_id = Identifier(required=True)
    voted_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Review:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    order_id = Identifier(required=True)

    rating = ValueObject(Rating, required=True)
    title = String(required=True, max_length=100)
    content = Text(required=True)
    pros = Text()  # JSON array of strings
    cons = Text()  # JSON array of strings
    images = HasMany(ReviewImage)

    verified = Boolean(default=True)
    helpful_votes = HasMany(HelpfulVote)
    helpful_count = Integer(default=0)

    status = String(choices=ReviewStatus, default=ReviewStatus.PENDING.value)
    admin_comment = Text()
    review_metadata = ValueObject(ReviewMetadata)

    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def content_cannot_exceed_maximum(self):
        if self.content and len(self.content) > 1000:
            raise ValidationError({"content": ["Review content cannot exceed 1000 characters"]})

    @invariant.post
    def title_must_not_be_blank(self):
        if self.title is not None and not self.title.strip():
            raise ValidationError({"title": ["Review title cannot be empty"]})

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if len(self.images) > MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot attach more than {MAX_IMAGES} images to a review"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        user_id,
        product_id,
        order_id,
        rating,
        title,
        content,
        pros=None,
        cons=None,
        images=None,
        purchase_date=None,
        device_info=None,
    ):
        now = datetime.now(UTC)
        review = cls(
            user_id=user_id,
            product_id=product_id,
            order_id=order_id,
            rating=Rating(score=rating),
            title=title,
            content=content,
            pros=json.dumps(pros) if pros else None,
            cons=json.dumps(cons) if cons else None,
            images=[ReviewImage(url=img["url"], caption=img.get("caption")) for img in images or []],
            verified=True,
            helpful_count=0,
            status=ReviewStatus.PENDING.value,
            review_metadata=ReviewMetadata(
                is_edited=False,
                purchase_date=purchase_date,
                device_info=device_info,
            ),
            created_at=now,
            updated_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_id=str(product_id),
                user_id=str(user_id),
                order_id=str(order_id),
                rating=rating,
                submitted_at=now,
            )
        )
        return review

    def is_written_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    @property
    def is_approved(self) -> bool:
        return self.status == ReviewStatus.APPROVED.value

    def _metadata(self, **changes):
        current = self.review_metadata
        values = {
            "is_edited": current.is_edited if current else False,
            "last_edited_at": current.last_edited_at if current else None,
            "moderated_at": current.moderated_at if current else None,
            "moderated_by": current.moderated_by if current else None,
            "purchase_date": current.purchase_date if current else None,
            "device_info": current.device_info if current else None,
        }
        values.update(changes)
        return ReviewMetadata(**values)

    # -------------------------------------------------------------------
    # Edit
    # -------------------------------------------------------------------
    def edit(self, rating=_UNSET, title=_UNSET, content=_UNSET, pros=_UNSET, cons=_UNSET, images=_UNSET):
        """Change content. Any edit sends the review back to moderation."""
        previous_status = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            if rating is not _UNSET:
                self.rating = Rating(score=rating)
            if title is not _UNSET:
                self.title = title
            if content is not _UNSET:
                self.content = content
            if pros is not _UNSET:
                self.pros = json.dumps(pros) if pros else None
            if cons is not _UNSET:
                self.cons = json.dumps(cons) if cons else None
            if images is not _UNSET:
                for image in list(self.images):
                    self.remove_images(image)
                for img in images or []:
                    self.add_images(ReviewImage(url=img["url"], caption=img.get("caption")))

            self.status = ReviewStatus.PENDING.value
            self.review_metadata = self._metadata(is_edited=True, last_edited_at=now)
            self.updated_at = now

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                product_id=str(self.product_id),
                previous_status=previous_status,
                rating=self.rating.score,
                edited_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def moderate(self, status, moderated_by, admin_comment=None):
        target = ReviewStatus(status)
        if target not in _MODERATION_TARGETS:
            raise ValidationError({"status": ["Moderation can only approve or reject a review"]})

        previous_status = self.status
        now = datetime.now(UTC)

        self.status = target.value
        if admin_comment is not None:
            self.admin_comment = admin_comment
        self.review_metadata = self._metadata(moderated_at=now, moderated_by=str(moderated_by))
        self.updated_at = now

        self.raise_(
            ReviewModerated(
                review_id=str(self.id),
                product_id=str(self.product_id),
                previous_status=previous_status,
                new_status=target.value,
                moderated_by=str(moderated_by),
                moderated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Helpful votes
    # -------------------------------------------------------------------
    def toggle_helpful(self, user_id) -> bool:
        """Add the user's helpful vote, or take it back. Returns True when added."""
        if self.is_written_by(user_id):
            raise ValidationError({"helpful": ["Cannot vote on your own review"]})

        existing = next((v for v in self.helpful_votes if str(v.user_id) == str(user_id)), None)
        if existing:
            self.remove_helpful_votes(existing)
        else:
            self.add_helpful_votes(HelpfulVote(user_id=user_id, voted_at=datetime.now(UTC)))
        self.helpful_count = len(self.helpful_votes)

        self.raise_(
            HelpfulVoteToggled(
                review_id=str(self.id),
                user_id=str(user_id),
                helpful="removed" if existing else "added",
                helpful_count=self.helpful_count,
            )
        )
        return existing is None
