import json
import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is loaded."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Reset data stores and the fake mailbox after every test."""
    from storefront.notifications.channel import reset_channels

    reset_channels()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    reset_channels()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
ADDRESS = {
    "street": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postal_code": "560001",
    "country": "India",
}


@pytest.fixture()
def address():
    return dict(ADDRESS)


@pytest.fixture()
def make_product():
    """Create and persist a product through its command; returns the Product."""
    from protean import current_domain

    from storefront.catalogue.management import CreateProduct
    from storefront.catalogue.product import Product

    def _make(**overrides):
        defaults = {
            "name": "Cotton Kurta",
            "base_price": 500.0,
            "discount_percent": 0.0,
            "quantity": 10,
            "brand": "Fabindia",
        }
        defaults.update(overrides)
        product_id = current_domain.process(CreateProduct(**defaults), asynchronous=False)
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture()
def reload_product():
    from protean import current_domain

    from storefront.catalogue.product import Product

    def _reload(product_id):
        return current_domain.repository_for(Product).get(str(product_id))

    return _reload


@pytest.fixture()
def add_to_cart():
    from protean import current_domain

    from storefront.cart.items import AddToCart

    def _add(user_id, product_id, quantity=1, specs=None):
        current_domain.process(
            AddToCart(
                user_id=user_id,
                product_id=str(product_id),
                quantity=quantity,
                selected_specs=json.dumps(specs) if specs else None,
            ),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def place_order():
    """Place an order from the user's current cart; returns the order id."""
    from protean import current_domain

    from storefront.order.placement import PlaceOrder

    def _place(user_id, **overrides):
        defaults = {
            "user_id": user_id,
            "billing_address": json.dumps(ADDRESS),
            "shipping_address": json.dumps(ADDRESS),
            "billing_name": "Asha Rao",
            "billing_email": "asha@example.com",
        }
        defaults.update(overrides)
        return current_domain.process(PlaceOrder(**defaults), asynchronous=False)

    return _place


@pytest.fixture()
def advance_order():
    """Drive an order through admin status updates, in order."""
    from protean import current_domain

    from storefront.order.status import UpdateOrderStatus

    def _advance(order_id, *statuses, tracking_number="TRK-1001"):
        for status in statuses:
            current_domain.process(
                UpdateOrderStatus(
                    order_id=order_id,
                    status=status,
                    changed_by="admin-1",
                    tracking_number=tracking_number if status == "shipped" else None,
                ),
                asynchronous=False,
            )

    return _advance


@pytest.fixture()
def delivered_purchase(make_product, add_to_cart, place_order, advance_order):
    """A product the user has bought and received; returns (product, order_id)."""

    def _purchase(user_id, product=None, quantity=1):
        product = product or make_product()
        add_to_cart(user_id, product.id, quantity)
        order_id = place_order(user_id)
        advance_order(order_id, "confirmed", "processing", "shipped", "delivered")
        return product, order_id

    return _purchase


@pytest.fixture()
def mailbox():
    from storefront.notifications.channel import get_channel

    return get_channel("email")
