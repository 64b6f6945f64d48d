"""Shared BDD fixtures and step definitions for orders."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.order.order import Order


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the captured domain error."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products created by the scenario, by name."""
    return {}


@pytest.fixture()
def order_ref():
    return {"id": None}


@pytest.fixture()
def customer_id():
    return "user-1"


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {quantity:d} in stock'))
def _(make_product, products, name, price, quantity):
    products[name] = make_product(name=name, base_price=price, quantity=quantity)


@given(parsers.cfparse('the customer has {quantity:d} "{name}" in the cart'))
def _(add_to_cart, customer_id, products, quantity, name):
    add_to_cart(customer_id, products[name].id, quantity)


@given("the customer has placed the order")
def _(place_order, customer_id, order_ref):
    order_ref["id"] = place_order(customer_id)


@given(parsers.cfparse('the order has moved through "{statuses}"'))
def _(advance_order, order_ref, statuses):
    advance_order(order_ref["id"], *[s.strip() for s in statuses.split(",")])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def _(order_ref, status):
    assert current_domain.repository_for(Order).get(order_ref["id"]).status == status


@then(parsers.cfparse("the order total is {total:f}"))
def _(order_ref, total):
    assert current_domain.repository_for(Order).get(order_ref["id"]).summary.total == total


@then(parsers.cfparse('the payment is "{status}"'))
def _(order_ref, status):
    assert current_domain.repository_for(Order).get(order_ref["id"]).payment.status == status


@then(parsers.cfparse('"{name}" has {quantity:d} in stock'))
def _(products, name, quantity):
    product = current_domain.repository_for(Product).get(products[name].id)
    assert product.inventory.quantity == quantity


@then("the cart is empty")
def _(customer_id):
    assert current_domain.repository_for(ShoppingCart).get(customer_id).is_empty


@then(parsers.cfparse('the request fails with "{code}"'))
def _(error, code):
    assert error["exc"] is not None
    assert error["exc"].code == code


@then(parsers.cfparse("the order has {count:d} failed delivery attempt"))
def _(order_ref, count):
    assert current_domain.repository_for(Order).get(order_ref["id"]).failed_delivery_attempts == count
