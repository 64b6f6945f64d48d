import pytest
from protean import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.errors import InsufficientStockError, ItemNotFoundError, ProductNotFoundError
from storefront.wishlist.management import (
    AddToWishlist,
    ClearWishlist,
    MoveWishlistItemToCart,
    RemoveFromWishlist,
    UpdateWishlistNotifications,
    wishlist_for,
)


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestWishlistCommands:
    def test_add_returns_count(self, make_product):
        first = make_product(name="Linen Shirt")
        second = make_product(name="Silk Scarf")
        assert _process(AddToWishlist(user_id="user-1", product_id=first.id)) == 1
        assert _process(AddToWishlist(user_id="user-1", product_id=first.id)) == 1
        assert _process(AddToWishlist(user_id="user-1", product_id=second.id)) == 2

    def test_unknown_product(self):
        with pytest.raises(ProductNotFoundError):
            _process(AddToWishlist(user_id="user-1", product_id="missing"))

    def test_remove_and_clear(self, make_product):
        first = make_product(name="Linen Shirt")
        second = make_product(name="Silk Scarf")
        _process(AddToWishlist(user_id="user-1", product_id=first.id))
        _process(AddToWishlist(user_id="user-1", product_id=second.id))

        _process(RemoveFromWishlist(user_id="user-1", product_id=first.id))
        assert wishlist_for("user-1").product_count == 1

        _process(ClearWishlist(user_id="user-1"))
        assert wishlist_for("user-1").product_count == 0

    def test_notification_preferences(self, make_product):
        product = make_product()
        _process(AddToWishlist(user_id="user-1", product_id=product.id))
        _process(UpdateWishlistNotifications(user_id="user-1", product_id=product.id, back_in_stock=False))

        entry = wishlist_for("user-1").entry_for(product.id)
        assert entry.notify_back_in_stock is False
        assert entry.notify_price_drops is True

    def test_notification_preferences_without_wishlist(self):
        with pytest.raises(ItemNotFoundError):
            _process(UpdateWishlistNotifications(user_id="user-1", product_id="p-1", price_drops=False))


class TestMoveToCart:
    def test_moves_one_unit(self, make_product):
        product = make_product()
        _process(AddToWishlist(user_id="user-1", product_id=product.id))
        _process(MoveWishlistItemToCart(user_id="user-1", product_id=product.id))

        cart = current_domain.repository_for(ShoppingCart).get("user-1")
        assert cart.item_for(product.id).quantity == 1
        assert wishlist_for("user-1").entry_for(product.id) is None

    def test_out_of_stock_keeps_entry(self, make_product):
        product = make_product(quantity=0)
        _process(AddToWishlist(user_id="user-1", product_id=product.id))
        with pytest.raises(InsufficientStockError):
            _process(MoveWishlistItemToCart(user_id="user-1", product_id=product.id))
        assert wishlist_for("user-1").entry_for(product.id) is not None

    def test_not_on_wishlist(self, make_product):
        product = make_product()
        with pytest.raises(ItemNotFoundError):
            _process(MoveWishlistItemToCart(user_id="user-1", product_id=product.id))
