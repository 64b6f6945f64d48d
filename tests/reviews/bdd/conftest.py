"""Shared BDD fixtures and step definitions for reviews."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from storefront.catalogue.product import Product
from storefront.reviews.moderation import ModerateReview
from storefront.reviews.queries import get_review
from storefront.reviews.submission import SubmitReview


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the captured domain error."""
    return {"exc": None}


@pytest.fixture()
def reviews():
    """Review ids by author."""
    return {}


def submit(product, user_id, stars):
    return current_domain.process(
        SubmitReview(
            user_id=user_id,
            product_id=str(product.id),
            rating=stars,
            title=f"{stars} stars",
            content="Honest opinion after a month of use.",
        ),
        asynchronous=False,
    )


def moderate(review_id, status):
    current_domain.process(
        ModerateReview(review_id=review_id, status=status, moderated_by="admin-1"),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product that "{first}" and "{second}" have received'), target_fixture="product")
def _(make_product, delivered_purchase, first, second):
    product = make_product(name="Handloom Saree", base_price=2500.0)
    delivered_purchase(first, product=product)
    delivered_purchase(second, product=product)
    return product


@given(parsers.cfparse('"{user_id}" reviewed it with {stars:d} stars'))
def _(product, reviews, user_id, stars):
    reviews[user_id] = submit(product, user_id, stars)


@given("the admin approves every review")
def _(reviews):
    for review_id in reviews.values():
        moderate(review_id, "approved")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the product is rated {average:f} from {count:d} reviews"))
def _(product, average, count):
    rating = current_domain.repository_for(Product).get(product.id).rating
    assert rating.average == average
    assert rating.count == count


@then(parsers.cfparse('the review by "{user_id}" is "{status}"'))
def _(reviews, user_id, status):
    assert get_review(reviews[user_id]).status == status


@then(parsers.cfparse('the request fails with "{code}"'))
def _(error, code):
    assert error["exc"] is not None
    assert error["exc"].code == code
