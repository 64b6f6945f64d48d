"""Domain events for the Order aggregate.

Notification handlers react to these after the unit of work commits; they
never influence whether the originating command succeeded.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into a cash-on-delivery order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    email = String()
    name = String()
    verification_code = String(required=True)
    items = Text(required=True)  # JSON: [{product_id, name, quantity, final_price}]
    subtotal = Float(required=True)
    discount = Float(default=0.0)
    shipping = Float(default=0.0)
    tax = Float(default=0.0)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderAddressesUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    email = String()
    billing_address = Text()  # JSON address
    shipping_address = Text()  # JSON address
    total = Float(required=True)
    updated_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    email = String()
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = String()
    tracking_number = String()
    reason = String()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class DeliveryAttemptRecorded:
    __version__ = 1

    order_id = Identifier(required=True)
    attempt_number = Integer(required=True)
    outcome = String(required=True)
    code_verified = Boolean(default=False)
    failed_attempts = Integer(default=0)
    agent_id = String()
    attempted_at = DateTime(required=True)
