"""Tests for ShoppingCart line management and its cached summary."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError

from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCleared, CartItemAdded
from storefront.catalogue.product import Product
from storefront.errors import InsufficientStockError, ItemNotFoundError


def _make_product(name="Cotton Kurta", base_price=500.0, discount_percent=0.0, quantity=10):
    return Product.create(
        name=name,
        slug=name.lower().replace(" ", "-"),
        base_price=base_price,
        discount_percent=discount_percent,
        quantity=quantity,
    )


def _make_cart(user_id="user-1"):
    return ShoppingCart.create(user_id=user_id)


class TestAddItem:
    def test_new_line_snapshots_price(self):
        cart = _make_cart()
        product = _make_product(base_price=800.0, discount_percent=10.0)
        cart.add_item(product, 2)

        item = cart.item_for(product.id)
        assert item.quantity == 2
        assert item.price.base_price == 800.0
        assert item.price.final_price == 720.0

    def test_snapshot_survives_reprice(self):
        cart = _make_cart()
        product = _make_product(base_price=800.0)
        cart.add_item(product, 1)
        product.reprice(base_price=900.0)
        assert cart.item_for(product.id).price.base_price == 800.0

    def test_existing_line_accumulates_and_merges_specs(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1, specs={"size": "M", "color": "red"})
        cart.add_item(product, 2, specs={"size": "L"})

        item = cart.item_for(product.id)
        assert len(cart.items) == 1
        assert item.quantity == 3
        assert item.specs == {"size": "L", "color": "red"}

    def test_accumulated_quantity_is_checked_against_stock(self):
        cart = _make_cart()
        product = _make_product(quantity=3)
        cart.add_item(product, 2)
        with pytest.raises(InsufficientStockError):
            cart.add_item(product, 2)
        assert cart.item_for(product.id).quantity == 2

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            _make_cart().add_item(_make_product(), 0)

    def test_out_of_stock_rejected(self):
        with pytest.raises(InsufficientStockError):
            _make_cart().add_item(_make_product(quantity=0), 1)

    def test_raises_item_added(self):
        cart = _make_cart()
        cart.add_item(_make_product(), 1)
        assert isinstance(cart._events[-1], CartItemAdded)


class TestUpdateAndRemove:
    def test_update_overwrites_quantity(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1)
        cart.update_item_quantity(product.id, 4, product=product)
        assert cart.item_for(product.id).quantity == 4
        assert cart.item_count == 4

    def test_update_to_zero_removes_line(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1)
        cart.update_item_quantity(product.id, 0)
        assert cart.is_empty

    def test_update_beyond_stock_rejected(self):
        cart = _make_cart()
        product = _make_product(quantity=2)
        cart.add_item(product, 1)
        with pytest.raises(InsufficientStockError):
            cart.update_item_quantity(product.id, 3, product=product)

    def test_update_absent_line(self):
        with pytest.raises(ItemNotFoundError):
            _make_cart().update_item_quantity("nope", 1)

    def test_remove_is_idempotent(self):
        cart = _make_cart()
        product = _make_product()
        cart.add_item(product, 1)
        cart.remove_item(product.id)
        cart.remove_item(product.id)
        assert cart.is_empty
        assert cart.item_count == 0

    def test_clear_drops_items_and_coupon(self):
        cart = _make_cart()
        cart.add_item(_make_product(), 1)
        cart.apply_coupon("SAVE10", 10.0)
        cart.clear()
        assert cart.is_empty
        assert cart.coupon is None
        assert cart.summary.total == 0.0
        assert isinstance(cart._events[-1], CartCleared)


class TestSummary:
    def test_example_cart_totals(self):
        cart = _make_cart()
        cart.add_item(_make_product(base_price=500.0), 2)
        summary = cart.summary
        assert summary.subtotal == 1000.0
        assert summary.discount == 0.0
        assert summary.shipping == 0.0
        assert summary.tax == 100.0
        assert summary.total == 1100.0

    def test_shipping_charged_below_threshold(self):
        cart = _make_cart()
        cart.add_item(_make_product(base_price=300.0), 1)
        assert cart.summary.shipping == 50.0
        assert cart.summary.total == 380.0

    def test_product_discount_reduces_taxable_amount(self):
        cart = _make_cart()
        cart.add_item(_make_product(base_price=1000.0, discount_percent=20.0), 2)
        summary = cart.summary
        assert summary.subtotal == 2000.0
        assert summary.discount == 400.0
        assert summary.tax == 160.0
        assert summary.total == 1760.0

    def test_coupon_adds_to_discount(self):
        cart = _make_cart()
        cart.add_item(_make_product(base_price=1000.0), 2)
        cart.apply_coupon("SAVE10", 10.0)
        assert cart.summary.discount == 200.0
        assert cart.summary.total == 1980.0

    def test_expired_coupon_is_ignored(self):
        cart = _make_cart()
        cart.add_item(_make_product(base_price=1000.0), 2)
        cart.apply_coupon("SAVE10", 10.0, expires_at=datetime.now(UTC) + timedelta(hours=1))
        cart.recompute_summary(now=datetime.now(UTC) + timedelta(hours=2))
        assert cart.summary.discount == 0.0

    def test_applying_expired_coupon_rejected(self):
        with pytest.raises(ValidationError):
            _make_cart().apply_coupon("OLD", 5.0, expires_at=datetime.now(UTC) - timedelta(days=1))

    def test_recompute_is_idempotent(self):
        cart = _make_cart()
        cart.add_item(_make_product(base_price=450.0, discount_percent=5.0), 3)
        cart.apply_coupon("SAVE10", 10.0)
        now = datetime.now(UTC)

        cart.recompute_summary(now)
        first = (cart.summary.to_dict(), cart.item_count)
        cart.recompute_summary(now)
        assert (cart.summary.to_dict(), cart.item_count) == first

    def test_empty_cart_has_zero_summary(self):
        cart = _make_cart()
        cart.recompute_summary()
        assert cart.summary.total == 0.0
        assert cart.summary.shipping == 0.0
