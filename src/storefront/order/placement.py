"""PlaceOrder — converts the user's cart into a cash-on-delivery order.

Runs as one unit of work: the order, every stock decrement and the cleared
cart commit together or not at all. Stock is re-checked against live
inventory first and the ledger's decrement stays the authoritative check.
A concurrent write to one of the products fails the commit with Protean's
ExpectedVersionError; the handler is retried on fresh data, so the loser
usually ends in StockUnavailableError, and once retries run out the version
conflict itself reaches the caller.
The confirmation email is sent by an event handler after commit.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import cart_for
from storefront.catalogue.lookup import ProductLookup
from storefront.domain import logger, storefront
from storefront.errors import EmptyCartError, InsufficientStockError, StockUnavailableError
from storefront.identity.user import find_user
from storefront.inventory.ledger import InventoryLedger
from storefront.order.order import Order, OrderSource
from storefront.shared.pricing import ShippingMethod


def load_address(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else value


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    billing_address = Text(required=True)  # JSON: address dict
    shipping_address = Text(required=True)  # JSON: address dict
    billing_name = String(max_length=200)
    billing_email = String(max_length=254)
    billing_phone = String(max_length=30)
    shipping_method = String(choices=ShippingMethod, default=ShippingMethod.STANDARD.value)
    notes = Text()
    source = String(choices=OrderSource, default=OrderSource.WEB.value)
    ip_address = String(max_length=64)
    user_agent = String(max_length=500)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = cart_for(command.user_id, create=False)
        if cart is None or cart.is_empty:
            raise EmptyCartError()

        lookup = ProductLookup()
        products = {}
        lines = []
        for item in cart.items:
            product = lookup.find_product(item.product_id)
            if product is None or not product.is_available(item.quantity):
                raise StockUnavailableError(item.product_id, product.name if product else None)

            products[str(product.id)] = product
            lines.append(
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "quantity": item.quantity,
                    "base_price": item.price.base_price,
                    "discount_percent": item.price.discount_percent,
                    "final_price": item.price.final_price,
                    "specifications": item.specs,
                }
            )

        user = find_user(command.user_id)
        order = Order.place(
            user_id=command.user_id,
            lines=lines,
            billing_address=load_address(command.billing_address),
            shipping_address=load_address(command.shipping_address),
            billing_name=command.billing_name or (user.name if user else None),
            billing_email=command.billing_email or (user.email if user else None),
            billing_phone=command.billing_phone or (user.phone if user else None),
            shipping_method=command.shipping_method,
            coupon_code=cart.coupon.code if cart.active_coupon_percent() else None,
            coupon_percent=cart.active_coupon_percent(),
            metadata={
                "source": command.source or OrderSource.WEB.value,
                "ip_address": command.ip_address,
                "user_agent": command.user_agent,
            },
            notes=command.notes,
        )

        try:
            InventoryLedger(lookup).adjust_many(
                [(line["product_id"], -line["quantity"]) for line in lines],
                products=products,
            )
        except InsufficientStockError as exc:
            raise StockUnavailableError(exc.product_id, products[exc.product_id].name) from exc

        current_domain.repository_for(Order).add(order)

        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            total=order.summary.total,
            items=len(lines),
        )
        return str(order.id)
