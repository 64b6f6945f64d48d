import pytest


@pytest.fixture()
def submit_review():
    from protean import current_domain

    from storefront.reviews.submission import SubmitReview

    def _submit(user_id, product_id, rating=5, **overrides):
        values = {
            "user_id": user_id,
            "product_id": str(product_id),
            "rating": rating,
            "title": "Worth it",
            "content": "Exactly as described.",
        }
        values.update(overrides)
        return current_domain.process(SubmitReview(**values), asynchronous=False)

    return _submit


@pytest.fixture()
def moderate():
    from protean import current_domain

    from storefront.reviews.moderation import ModerateReview

    def _moderate(review_id, status="approved"):
        return current_domain.process(
            ModerateReview(review_id=review_id, status=status, moderated_by="admin-1"),
            asynchronous=False,
        )

    return _moderate
