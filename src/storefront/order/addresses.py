"""UpdateOrderAddresses — customer changes billing/shipping before processing starts."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.catalogue.lookup import ProductLookup
from storefront.domain import storefront
from storefront.errors import DomainValidationError, StockUnavailableError
from storefront.order.order import Order
from storefront.order.placement import load_address
from storefront.order.queries import order_for_user


@storefront.command(part_of="Order")
class UpdateOrderAddresses:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    billing_address = Text()  # JSON: address dict
    shipping_address = Text()  # JSON: address dict


@storefront.command_handler(part_of=Order)
class UpdateOrderAddressesHandler:
    @handle(UpdateOrderAddresses)
    def update_order_addresses(self, command):
        if not command.billing_address and not command.shipping_address:
            raise DomainValidationError({"address": ["Provide a billing or shipping address to update"]})

        order = order_for_user(command.order_id, command.user_id)

        # The ordered quantities are already held by this order; only check
        # that every product is still sold.
        lookup = ProductLookup()
        for item in order.items:
            if lookup.find_product(item.product_id) is None:
                raise StockUnavailableError(item.product_id, item.name)

        order.update_addresses(
            billing_address=load_address(command.billing_address),
            shipping_address=load_address(command.shipping_address),
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
