"""Cart item management — commands and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.lookup import ProductLookup
from storefront.domain import storefront
from storefront.errors import ItemNotFoundError


def cart_for(user_id, create=True) -> ShoppingCart | None:
    """Load the user's cart, creating an empty one on first use."""
    try:
        return current_domain.repository_for(ShoppingCart).get(user_id)
    except ObjectNotFoundError:
        return ShoppingCart.create(user_id=user_id) if create else None


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)
    selected_specs = Text()  # JSON object


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    selected_specs = Text()  # JSON object


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = ProductLookup().get_product(command.product_id)
        cart = cart_for(command.user_id)
        cart.add_item(
            product,
            quantity=command.quantity,
            specs=json.loads(command.selected_specs) if command.selected_specs else None,
        )
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.user_id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = cart_for(command.user_id)
        if cart.item_for(command.product_id) is None:
            raise ItemNotFoundError(command.product_id)

        product = ProductLookup().get_product(command.product_id) if command.quantity else None
        cart.update_item_quantity(
            command.product_id,
            command.quantity,
            product=product,
            specs=json.loads(command.selected_specs) if command.selected_specs else None,
        )
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = cart_for(command.user_id, create=False)
        if cart is None:
            return
        cart.remove_item(command.product_id)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = cart_for(command.user_id, create=False)
        if cart is None:
            return
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)
