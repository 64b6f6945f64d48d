"""Order aggregate (CQRS) — a cash-on-delivery order placed from a cart.

Items and their prices are snapshotted at placement and never change. The
status, payment and shipping sub-fields move through a fixed state machine:

    pending    → confirmed | cancelled
    confirmed  → processing | cancelled
    processing → shipped | cancelled
    shipped    → delivered | cancelled
    delivered  → returned
    cancelled, returned (terminal)

Stock movements that accompany placement and cancellation are performed by
the command handlers through the inventory ledger, inside the same unit of
work as the order itself.
"""

import json
import secrets
import string
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.errors import DomainValidationError, InvalidTransitionError, LimitExceededError
from storefront.order.events import (
    DeliveryAttemptRecorded,
    OrderAddressesUpdated,
    OrderPlaced,
    OrderStatusChanged,
)
from storefront.shared.address import Address
from storefront.shared.pricing import ShippingMethod, Summary, compute_summary

COD_LIMIT = 50000.0
MAX_FAILED_DELIVERY_ATTEMPTS = 3
VERIFICATION_CODE_LENGTH = 6
_VERIFICATION_ALPHABET = string.ascii_uppercase + string.digits


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentMethod(Enum):
    COD = "cod"


class PaymentStatus(Enum):
    COD_PENDING = "cod_pending"
    COD_COLLECTED = "cod_collected"
    CANCELLED = "cancelled"


class DeliveryOutcome(Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"
    RESCHEDULED = "rescheduled"


class OrderSource(Enum):
    WEB = "web"
    MOBILE = "mobile"
    API = "api"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.RETURNED: set(),  # Terminal
}

# Customers may edit addresses or cancel only before processing starts
_EDITABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

_STATUS_TIMESTAMPS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
    OrderStatus.RETURNED: "returned_at",
}


def generate_verification_code() -> str:
    return "".join(secrets.choice(_VERIFICATION_ALPHABET) for _ in range(VERIFICATION_CODE_LENGTH))


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class Payment:
    """Cash-on-delivery payment state. The verification code never changes."""

    method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    status = String(choices=PaymentStatus, default=PaymentStatus.COD_PENDING.value)
    verification_code = String(required=True, max_length=VERIFICATION_CODE_LENGTH)
    collection_date = DateTime()
    collected_by = String(max_length=100)


@storefront.value_object(part_of="Order")
class OrderMetadata:
    source = String(choices=OrderSource, default=OrderSource.WEB.value)
    ip_address = String(max_length=64)
    user_agent = String(max_length=500)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Immutable snapshot of one purchased line."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    quantity = Integer(required=True, min_value=1)
    base_price = Float(required=True, min_value=0.0)
    discount_percent = Float(default=0.0, min_value=0.0, max_value=100.0)
    final_price = Float(required=True, min_value=0.0)
    specifications = Text()  # JSON object

    @property
    def line_total(self) -> float:
        return round(self.final_price * self.quantity, 2)


@storefront.entity(part_of="Order")
class DeliveryAttempt:
    attempted_at = DateTime(required=True)
    status = String(choices=DeliveryOutcome, required=True)
    code_verified = Boolean(default=False)
    agent_id = String(max_length=100)
    notes = Text()


@storefront.entity(part_of="Order")
class CollectionAttempt:
    """Payment-side record of each cash handoff."""

    attempted_at = DateTime(required=True)
    collected = Boolean(default=False)
    amount = Float(default=0.0)
    notes = Text()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)

    # Payment
    payment = ValueObject(Payment, required=True)
    collection_attempts = HasMany(CollectionAttempt)

    # Billing
    billing_address = ValueObject(Address, required=True)
    billing_name = String(max_length=200)
    billing_email = String(max_length=254)
    billing_phone = String(max_length=30)

    # Shipping
    shipping_address = ValueObject(Address, required=True)
    shipping_method = String(choices=ShippingMethod, default=ShippingMethod.STANDARD.value)
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()
    delivery_attempts = HasMany(DeliveryAttempt)

    # Pricing
    coupon_code = String(max_length=50)
    coupon_percent = Float(default=0.0)
    summary = ValueObject(Summary)

    request_metadata = ValueObject(OrderMetadata)
    notes = Text()
    cancellation_reason = String(max_length=500)

    created_at = DateTime()
    updated_at = DateTime()
    confirmed_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    returned_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        lines,
        billing_address,
        shipping_address,
        billing_name=None,
        billing_email=None,
        billing_phone=None,
        shipping_method=ShippingMethod.STANDARD.value,
        coupon_code=None,
        coupon_percent=0.0,
        metadata=None,
        notes=None,
    ):
        """Build a pending order from priced lines.

        Args:
            lines: list of dicts with product_id, name, quantity, base_price,
                   discount_percent, final_price and optional specifications.
            billing_address / shipping_address: dicts of Address fields.
            metadata: dict with source, ip_address, user_agent.

        Raises LimitExceededError when the total is above the COD ceiling.
        """
        now = datetime.now(UTC)

        order = cls(
            user_id=user_id,
            items=[
                OrderItem(
                    product_id=line["product_id"],
                    name=line["name"],
                    quantity=line["quantity"],
                    base_price=line["base_price"],
                    discount_percent=line.get("discount_percent") or 0.0,
                    final_price=line["final_price"],
                    specifications=json.dumps(line["specifications"]) if line.get("specifications") else None,
                )
                for line in lines
            ],
            status=OrderStatus.PENDING.value,
            payment=Payment(
                method=PaymentMethod.COD.value,
                status=PaymentStatus.COD_PENDING.value,
                verification_code=generate_verification_code(),
            ),
            billing_address=Address(**billing_address),
            billing_name=billing_name,
            billing_email=billing_email,
            billing_phone=billing_phone,
            shipping_address=Address(**shipping_address),
            shipping_method=shipping_method or ShippingMethod.STANDARD.value,
            coupon_code=coupon_code,
            coupon_percent=coupon_percent or 0.0,
            request_metadata=OrderMetadata(**(metadata or {})),
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.recompute_summary()
        order.assert_within_cod_limit()

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                email=billing_email,
                name=billing_name,
                verification_code=order.payment.verification_code,
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "name": item.name,
                            "quantity": item.quantity,
                            "final_price": item.final_price,
                        }
                        for item in order.items
                    ]
                ),
                subtotal=order.summary.subtotal,
                discount=order.summary.discount,
                shipping=order.summary.shipping,
                tax=order.summary.tax,
                total=order.summary.total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def recompute_summary(self):
        self.summary = compute_summary(
            [(i.base_price, i.discount_percent, i.quantity) for i in self.items],
            coupon_percent=self.coupon_percent,
            shipping_method=self.shipping_method,
        )

    def assert_within_cod_limit(self):
        if self.summary.total > COD_LIMIT:
            raise LimitExceededError(self.summary.total, COD_LIMIT)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    @property
    def is_editable(self) -> bool:
        return OrderStatus(self.status) in _EDITABLE_STATES

    @property
    def failed_delivery_attempts(self) -> int:
        return len([a for a in self.delivery_attempts if a.status == DeliveryOutcome.FAILED.value])

    def stock_lines(self) -> list[tuple[str, int]]:
        return [(str(item.product_id), item.quantity) for item in self.items]

    # -------------------------------------------------------------------
    # Address changes
    # -------------------------------------------------------------------
    def update_addresses(self, billing_address=None, shipping_address=None):
        """Replace billing and/or shipping address, then re-price and re-check the COD ceiling."""
        if not self.is_editable:
            raise DomainValidationError(
                {"status": [f"Addresses cannot be changed once an order is {self.status}"]}
            )

        if billing_address is not None:
            self.billing_address = Address(**billing_address)
        if shipping_address is not None:
            self.shipping_address = Address(**shipping_address)

        self.recompute_summary()
        self.assert_within_cod_limit()

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderAddressesUpdated(
                order_id=str(self.id),
                user_id=str(self.user_id),
                email=self.billing_email,
                billing_address=json.dumps(self.billing_address.to_dict()),
                shipping_address=json.dumps(self.shipping_address.to_dict()),
                total=self.summary.total,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(current.value, target_status.value)

    def _update_payment(self, **changes):
        values = {
            "method": self.payment.method,
            "status": self.payment.status,
            "verification_code": self.payment.verification_code,
            "collection_date": self.payment.collection_date,
            "collected_by": self.payment.collected_by,
        }
        values.update(changes)
        self.payment = Payment(**values)

    def transition_to(self, target, changed_by=None, tracking_number=None, estimated_delivery=None, reason=None):
        """Move to ``target`` status, applying the transition's side effects on the order.

        Restocking on cancellation is left to the caller, who owns the ledger.
        """
        target = OrderStatus(target)
        self._assert_can_transition(target)

        if target == OrderStatus.SHIPPED and not (tracking_number or self.tracking_number):
            raise DomainValidationError({"tracking_number": ["A tracking number is required to ship an order"]})

        now = datetime.now(UTC)
        previous = self.status

        if target == OrderStatus.SHIPPED:
            self.tracking_number = tracking_number or self.tracking_number
            if estimated_delivery is not None:
                self.estimated_delivery = estimated_delivery
        elif target == OrderStatus.DELIVERED:
            self._update_payment(
                status=PaymentStatus.COD_COLLECTED.value,
                collection_date=now,
                collected_by=str(changed_by) if changed_by else None,
            )
        elif target == OrderStatus.CANCELLED:
            self._update_payment(status=PaymentStatus.CANCELLED.value)
            self.cancellation_reason = reason

        self.status = target.value
        setattr(self, _STATUS_TIMESTAMPS.get(target, "updated_at"), now)
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                user_id=str(self.user_id),
                email=self.billing_email,
                previous_status=previous,
                new_status=target.value,
                changed_by=str(changed_by) if changed_by else None,
                tracking_number=self.tracking_number,
                reason=reason,
                changed_at=now,
            )
        )

    def cancel_by_customer(self, user_id, reason=None):
        if not self.is_editable:
            raise InvalidTransitionError(self.status, OrderStatus.CANCELLED.value)
        self.transition_to(OrderStatus.CANCELLED, changed_by=user_id, reason=reason or "Cancelled by customer")

    # -------------------------------------------------------------------
    # Delivery handoff
    # -------------------------------------------------------------------
    def record_delivery_attempt(self, outcome, verification_code=None, agent_id=None, notes=None) -> bool:
        """Append a delivery attempt; ``delivered`` needs the matching verification code.

        A wrong code is stored as a ``failed`` attempt. Reaching
        MAX_FAILED_DELIVERY_ATTEMPTS cancels the order.

        Returns False when a ``delivered`` outcome was refused for a code mismatch.
        """
        outcome = DeliveryOutcome(outcome)
        if OrderStatus(self.status) != OrderStatus.SHIPPED:
            raise InvalidTransitionError(self.status, OrderStatus.DELIVERED.value)

        now = datetime.now(UTC)
        code_verified = False
        code_rejected = False

        if outcome == DeliveryOutcome.DELIVERED:
            code_verified = bool(verification_code) and (
                verification_code.strip().upper() == self.payment.verification_code
            )
            if not code_verified:
                code_rejected = True
                outcome = DeliveryOutcome.FAILED
                notes = notes or "Verification code mismatch"

        self.add_delivery_attempts(
            DeliveryAttempt(
                attempted_at=now,
                status=outcome.value,
                code_verified=code_verified,
                agent_id=agent_id,
                notes=notes,
            )
        )
        if outcome in (DeliveryOutcome.DELIVERED, DeliveryOutcome.FAILED):
            self.add_collection_attempts(
                CollectionAttempt(
                    attempted_at=now,
                    collected=outcome == DeliveryOutcome.DELIVERED,
                    amount=self.summary.total if outcome == DeliveryOutcome.DELIVERED else 0.0,
                    notes=notes,
                )
            )
        self.updated_at = now

        self.raise_(
            DeliveryAttemptRecorded(
                order_id=str(self.id),
                attempt_number=len(self.delivery_attempts),
                outcome=outcome.value,
                code_verified=code_verified,
                failed_attempts=self.failed_delivery_attempts,
                agent_id=agent_id,
                attempted_at=now,
            )
        )

        if outcome == DeliveryOutcome.DELIVERED:
            self.transition_to(OrderStatus.DELIVERED, changed_by=agent_id)
        elif self.failed_delivery_attempts >= MAX_FAILED_DELIVERY_ATTEMPTS:
            self.transition_to(
                OrderStatus.CANCELLED,
                changed_by="system",
                reason=f"Delivery failed {self.failed_delivery_attempts} times",
            )

        return not code_rejected
