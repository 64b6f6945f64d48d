"""Application tests for cart and coupon commands."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.cart.cart import ShoppingCart
from storefront.cart.coupons import ApplyCouponToCart, CreateCoupon, RemoveCouponFromCart
from storefront.cart.items import ClearCart, RemoveFromCart, UpdateCartQuantity, cart_for
from storefront.errors import InsufficientStockError, ItemNotFoundError, NotFoundError, ProductNotFoundError


def _cart(user_id):
    return current_domain.repository_for(ShoppingCart).get(user_id)


class TestAddToCart:
    def test_first_add_creates_cart(self, make_product, add_to_cart):
        product = make_product()
        add_to_cart("user-1", product.id, 2)
        cart = _cart("user-1")
        assert cart.item_count == 2
        assert cart.summary.subtotal == 1000.0

    def test_unknown_product(self, add_to_cart):
        with pytest.raises(ProductNotFoundError):
            add_to_cart("user-1", "missing", 1)

    def test_insufficient_stock_leaves_cart_unchanged(self, make_product, add_to_cart):
        product = make_product(quantity=2)
        add_to_cart("user-1", product.id, 2)
        with pytest.raises(InsufficientStockError):
            add_to_cart("user-1", product.id, 1)
        assert _cart("user-1").item_count == 2

    def test_specs_are_merged(self, make_product, add_to_cart):
        product = make_product()
        add_to_cart("user-1", product.id, 1, specs={"size": "M"})
        add_to_cart("user-1", product.id, 1, specs={"color": "blue"})
        item = _cart("user-1").item_for(product.id)
        assert item.specs == {"size": "M", "color": "blue"}


class TestChangeCart:
    def test_update_quantity(self, make_product, add_to_cart):
        product = make_product()
        add_to_cart("user-1", product.id, 1)
        current_domain.process(
            UpdateCartQuantity(user_id="user-1", product_id=str(product.id), quantity=3),
            asynchronous=False,
        )
        assert _cart("user-1").item_count == 3

    def test_update_absent_item(self, make_product, add_to_cart):
        product = make_product()
        other = make_product(name="Other")
        add_to_cart("user-1", product.id, 1)
        with pytest.raises(ItemNotFoundError):
            current_domain.process(
                UpdateCartQuantity(user_id="user-1", product_id=str(other.id), quantity=1),
                asynchronous=False,
            )

    def test_update_product_missing_from_catalogue_and_cart(self, make_product, add_to_cart):
        add_to_cart("user-1", make_product().id, 1)
        with pytest.raises(ItemNotFoundError):
            current_domain.process(
                UpdateCartQuantity(user_id="user-1", product_id="deleted-product", quantity=2),
                asynchronous=False,
            )

    def test_remove(self, make_product, add_to_cart):
        product = make_product()
        add_to_cart("user-1", product.id, 1)
        current_domain.process(RemoveFromCart(user_id="user-1", product_id=str(product.id)), asynchronous=False)
        assert _cart("user-1").is_empty

    def test_remove_without_cart_is_noop(self):
        current_domain.process(RemoveFromCart(user_id="nobody", product_id="p1"), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _cart("nobody")

    def test_clear(self, make_product, add_to_cart):
        product = make_product()
        add_to_cart("user-1", product.id, 2)
        current_domain.process(ClearCart(user_id="user-1"), asynchronous=False)
        assert _cart("user-1").is_empty

    def test_cart_for_without_create(self):
        assert cart_for("nobody", create=False) is None


class TestCoupons:
    def _create(self, code="SAVE10", percent=10.0, expires_at=None):
        current_domain.process(
            CreateCoupon(code=code, discount_percentage=percent, expires_at=expires_at),
            asynchronous=False,
        )

    def test_apply_coupon(self, make_product, add_to_cart):
        self._create()
        product = make_product(base_price=1000.0)
        add_to_cart("user-1", product.id, 1)
        current_domain.process(ApplyCouponToCart(user_id="user-1", code="save10"), asynchronous=False)

        cart = _cart("user-1")
        assert cart.coupon.code == "SAVE10"
        assert cart.summary.discount == 100.0

    def test_unknown_coupon(self):
        with pytest.raises(NotFoundError):
            current_domain.process(ApplyCouponToCart(user_id="user-1", code="NOPE"), asynchronous=False)

    def test_expired_coupon(self):
        self._create(code="OLD", expires_at=datetime.now(UTC) - timedelta(days=1))
        with pytest.raises(ValidationError):
            current_domain.process(ApplyCouponToCart(user_id="user-1", code="OLD"), asynchronous=False)

    def test_duplicate_code(self):
        self._create()
        with pytest.raises(ValidationError):
            self._create(code="save10")

    def test_remove_coupon(self, make_product, add_to_cart):
        self._create()
        product = make_product(base_price=1000.0)
        add_to_cart("user-1", product.id, 1)
        current_domain.process(ApplyCouponToCart(user_id="user-1", code="SAVE10"), asynchronous=False)
        current_domain.process(RemoveCouponFromCart(user_id="user-1"), asynchronous=False)

        cart = _cart("user-1")
        assert cart.coupon is None
        assert cart.summary.discount == 0.0
