"""Review aggregate and rating arithmetic."""

import pytest
from protean.exceptions import ValidationError

from storefront.reviews.events import HelpfulVoteToggled, ReviewModerated, ReviewSubmitted
from storefront.reviews.rating import summarize
from storefront.reviews.review import MAX_IMAGES, Review, ReviewStatus


def _submit(**overrides):
    values = {
        "user_id": "user-1",
        "product_id": "product-1",
        "order_id": "order-1",
        "rating": 4,
        "title": "Good fabric",
        "content": "Soft and breathable, runs a little large.",
    }
    values.update(overrides)
    return Review.submit(**values)


class TestSubmit:
    def test_starts_pending_and_verified(self):
        review = _submit(pros=["soft"], images=[{"url": "https://img.example.com/1.jpg"}])
        assert review.status == ReviewStatus.PENDING.value
        assert review.verified is True
        assert review.rating.score == 4
        assert len(review.images) == 1
        assert isinstance(review._events[-1], ReviewSubmitted)

    @pytest.mark.parametrize("score", [0, 6])
    def test_rating_out_of_range(self, score):
        with pytest.raises(ValidationError):
            _submit(rating=score)

    def test_content_limit(self):
        with pytest.raises(ValidationError):
            _submit(content="x" * 1001)

    def test_blank_title(self):
        with pytest.raises(ValidationError):
            _submit(title="   ")

    def test_image_limit(self):
        images = [{"url": f"https://img.example.com/{i}.jpg"} for i in range(MAX_IMAGES + 1)]
        with pytest.raises(ValidationError):
            _submit(images=images)


class TestEditAndModerate:
    def test_moderation_approves(self):
        review = _submit()
        review.moderate("approved", moderated_by="admin-1", admin_comment="Looks fine")
        assert review.is_approved
        assert review.admin_comment == "Looks fine"
        assert review.review_metadata.moderated_by == "admin-1"
        assert isinstance(review._events[-1], ReviewModerated)

    def test_moderator_can_reverse_decision(self):
        review = _submit()
        review.moderate("approved", moderated_by="admin-1")
        review.moderate("rejected", moderated_by="admin-2")
        assert review.status == "rejected"

    def test_moderation_cannot_set_pending(self):
        with pytest.raises(ValidationError):
            _submit().moderate("pending", moderated_by="admin-1")

    def test_edit_returns_to_pending(self):
        review = _submit()
        review.moderate("approved", moderated_by="admin-1")
        review.edit(rating=2, content="Faded after one wash.")

        assert review.status == "pending"
        assert review.rating.score == 2
        assert review.title == "Good fabric"
        assert review.review_metadata.is_edited is True
        assert review.review_metadata.moderated_by == "admin-1"

    def test_edit_replaces_images(self):
        review = _submit(images=[{"url": "https://img.example.com/1.jpg"}])
        review.edit(images=[{"url": "https://img.example.com/2.jpg", "caption": "after"}])
        assert [i.url for i in review.images] == ["https://img.example.com/2.jpg"]


class TestHelpfulVotes:
    def test_toggle_on_and_off(self):
        review = _submit()
        assert review.toggle_helpful("user-2") is True
        assert review.helpful_count == 1
        assert review.toggle_helpful("user-2") is False
        assert review.helpful_count == 0
        assert isinstance(review._events[-1], HelpfulVoteToggled)

    def test_author_cannot_vote(self):
        with pytest.raises(ValidationError):
            _submit().toggle_helpful("user-1")


class TestSummarize:
    def test_empty(self):
        assert summarize([]) == (0.0, 0, [0, 0, 0, 0, 0])

    def test_average_rounded_to_one_decimal(self):
        average, count, distribution = summarize([5, 4, 4])
        assert average == 4.3
        assert count == 3
        assert distribution == [0, 0, 0, 2, 1]

    def test_count_matches_distribution(self):
        average, count, distribution = summarize([1, 2, 3, 4, 5, 5])
        assert count == sum(distribution) == 6
        assert average == 3.3
