"""Wishlist management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import cart_for
from storefront.catalogue.lookup import ProductLookup
from storefront.domain import storefront
from storefront.errors import ItemNotFoundError
from storefront.wishlist.wishlist import Wishlist


def wishlist_for(user_id, create=True) -> Wishlist | None:
    try:
        return current_domain.repository_for(Wishlist).get(user_id)
    except ObjectNotFoundError:
        return Wishlist.create(user_id=user_id) if create else None


@storefront.command(part_of="Wishlist")
class AddToWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Wishlist")
class RemoveFromWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Wishlist")
class ClearWishlist:
    user_id = Identifier(required=True)


@storefront.command(part_of="Wishlist")
class UpdateWishlistNotifications:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    price_drops = Boolean()
    back_in_stock = Boolean()


@storefront.command(part_of="Wishlist")
class MoveWishlistItemToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Wishlist)
class ManageWishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        ProductLookup().get_product(command.product_id)
        wishlist = wishlist_for(command.user_id)
        wishlist.add_product(command.product_id)
        current_domain.repository_for(Wishlist).add(wishlist)
        return wishlist.product_count

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        wishlist = wishlist_for(command.user_id, create=False)
        if wishlist is None:
            return
        wishlist.remove_product(command.product_id)
        current_domain.repository_for(Wishlist).add(wishlist)

    @handle(ClearWishlist)
    def clear_wishlist(self, command):
        wishlist = wishlist_for(command.user_id, create=False)
        if wishlist is None:
            return
        wishlist.clear()
        current_domain.repository_for(Wishlist).add(wishlist)

    @handle(UpdateWishlistNotifications)
    def update_notifications(self, command):
        wishlist = wishlist_for(command.user_id, create=False)
        if wishlist is None:
            raise ItemNotFoundError(command.product_id, container="wishlist")
        wishlist.update_notifications(
            command.product_id,
            price_drops=command.price_drops,
            back_in_stock=command.back_in_stock,
        )
        current_domain.repository_for(Wishlist).add(wishlist)

    @handle(MoveWishlistItemToCart)
    def move_to_cart(self, command):
        """Put one unit of a wishlisted product in the cart and take it off the list."""
        wishlist = wishlist_for(command.user_id, create=False)
        if wishlist is None or wishlist.entry_for(command.product_id) is None:
            raise ItemNotFoundError(command.product_id, container="wishlist")

        product = ProductLookup().get_product(command.product_id)
        cart = cart_for(command.user_id)
        cart.add_item(product, quantity=1)
        wishlist.remove_product(command.product_id)

        current_domain.repository_for(ShoppingCart).add(cart)
        current_domain.repository_for(Wishlist).add(wishlist)
