"""Order aggregate: placement pricing, the status state machine and delivery handoff."""

import pytest
from protean.exceptions import ValidationError

from storefront.errors import DomainValidationError, InvalidTransitionError, LimitExceededError
from storefront.order.events import DeliveryAttemptRecorded, OrderPlaced, OrderStatusChanged
from storefront.order.order import (
    COD_LIMIT,
    MAX_FAILED_DELIVERY_ATTEMPTS,
    VERIFICATION_CODE_LENGTH,
    Order,
    OrderStatus,
    PaymentStatus,
)

ADDRESS = {
    "street": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postal_code": "560001",
}

ALLOWED = {
    ("pending", "confirmed"),
    ("pending", "cancelled"),
    ("confirmed", "processing"),
    ("confirmed", "cancelled"),
    ("processing", "shipped"),
    ("processing", "cancelled"),
    ("shipped", "delivered"),
    ("shipped", "cancelled"),
    ("delivered", "returned"),
}

ALL_PAIRS = [(current.value, target.value) for current in OrderStatus for target in OrderStatus]


def _line(base_price=500.0, quantity=2, discount_percent=0.0, product_id="p-1"):
    final = round(base_price * (1 - discount_percent / 100), 2)
    return {
        "product_id": product_id,
        "name": "Cotton Kurta",
        "quantity": quantity,
        "base_price": base_price,
        "discount_percent": discount_percent,
        "final_price": final,
    }


def _place(*lines, **kwargs):
    return Order.place(
        user_id="user-1",
        lines=list(lines) or [_line()],
        billing_address=ADDRESS,
        shipping_address=ADDRESS,
        billing_email="asha@example.com",
        **kwargs,
    )


def _shipped_order():
    order = _place()
    order.transition_to("confirmed")
    order.transition_to("processing")
    order.transition_to("shipped", tracking_number="TRK-1")
    return order


class TestPlacement:
    def test_new_order_is_pending_cod(self):
        order = _place()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment.method == "cod"
        assert order.payment.status == PaymentStatus.COD_PENDING.value
        assert len(order.payment.verification_code) == VERIFICATION_CODE_LENGTH
        assert order.payment.verification_code.isalnum()

    def test_totals_for_example_cart(self):
        summary = _place().summary
        assert summary.subtotal == 1000.0
        assert summary.shipping == 0.0
        assert summary.tax == 100.0
        assert summary.total == 1100.0

    def test_express_shipping_below_threshold(self):
        order = _place(_line(base_price=200.0, quantity=1), shipping_method="express")
        assert order.summary.shipping == 100.0
        assert order.summary.total == 320.0

    def test_coupon_percent_carried_into_discount(self):
        order = _place(_line(base_price=1000.0, quantity=2), coupon_code="SAVE10", coupon_percent=10.0)
        assert order.summary.discount == 200.0
        assert order.coupon_code == "SAVE10"

    def test_cod_limit(self):
        with pytest.raises(LimitExceededError) as exc:
            _place(_line(base_price=COD_LIMIT, quantity=1))
        assert exc.value.total > COD_LIMIT

    def test_raises_order_placed(self):
        order = _place()
        event = next(e for e in order._events if isinstance(e, OrderPlaced))
        assert event.total == 1100.0
        assert event.verification_code == order.payment.verification_code
        assert event.email == "asha@example.com"

    def test_order_needs_items(self):
        with pytest.raises(ValidationError):
            Order.place(user_id="user-1", lines=[], billing_address=ADDRESS, shipping_address=ADDRESS)


class TestTransitionTable:
    @pytest.mark.parametrize("current,target", ALL_PAIRS)
    def test_transition(self, current, target):
        order = _place()
        order.status = current
        order.tracking_number = "TRK-1"

        if (current, target) in ALLOWED:
            order.transition_to(target)
            assert order.status == target
        else:
            with pytest.raises(InvalidTransitionError):
                order.transition_to(target)
            assert order.status == current

    def test_shipping_requires_tracking_number(self):
        order = _place()
        order.transition_to("confirmed")
        order.transition_to("processing")
        with pytest.raises(DomainValidationError):
            order.transition_to("shipped")
        assert order.status == "processing"

    def test_shipping_records_tracking(self):
        order = _shipped_order()
        assert order.tracking_number == "TRK-1"
        assert order.shipped_at is not None

    def test_delivery_collects_payment(self):
        order = _shipped_order()
        order.transition_to("delivered", changed_by="agent-7")
        assert order.payment.status == PaymentStatus.COD_COLLECTED.value
        assert order.payment.collected_by == "agent-7"
        assert order.delivered_at is not None

    def test_cancellation_keeps_reason(self):
        order = _place()
        order.transition_to("cancelled", reason="Changed my mind")
        assert order.cancellation_reason == "Changed my mind"
        assert order.payment.status == PaymentStatus.CANCELLED.value

    def test_status_change_event(self):
        order = _place()
        order.transition_to("confirmed", changed_by="admin-1")
        event = [e for e in order._events if isinstance(e, OrderStatusChanged)][-1]
        assert event.previous_status == "pending"
        assert event.new_status == "confirmed"


class TestCustomerCancellation:
    def test_cancel_while_confirmed(self):
        order = _place()
        order.transition_to("confirmed")
        order.cancel_by_customer("user-1")
        assert order.status == "cancelled"

    def test_cannot_cancel_once_processing(self):
        order = _place()
        order.transition_to("confirmed")
        order.transition_to("processing")
        with pytest.raises(InvalidTransitionError):
            order.cancel_by_customer("user-1")


class TestAddresses:
    def test_update_while_pending(self):
        order = _place()
        order.update_addresses(shipping_address={**ADDRESS, "city": "Mysuru"})
        assert order.shipping_address.city == "Mysuru"
        assert order.billing_address.city == "Bengaluru"

    def test_update_after_processing_rejected(self):
        order = _place()
        order.transition_to("confirmed")
        order.transition_to("processing")
        with pytest.raises(DomainValidationError):
            order.update_addresses(shipping_address=ADDRESS)


class TestDeliveryAttempts:
    def test_matching_code_delivers(self):
        order = _shipped_order()
        accepted = order.record_delivery_attempt(
            "delivered", verification_code=order.payment.verification_code.lower(), agent_id="agent-7"
        )
        assert accepted is True
        assert order.status == "delivered"
        assert order.delivery_attempts[0].code_verified is True
        assert order.payment.status == PaymentStatus.COD_COLLECTED.value

    def test_wrong_code_is_stored_as_failed(self):
        order = _shipped_order()
        accepted = order.record_delivery_attempt("delivered", verification_code="WRONG1")
        assert accepted is False
        assert order.status == "shipped"
        assert order.delivery_attempts[0].status == "failed"
        assert order.failed_delivery_attempts == 1

    def test_rescheduled_does_not_count_as_failure(self):
        order = _shipped_order()
        order.record_delivery_attempt("rescheduled")
        assert order.failed_delivery_attempts == 0
        assert order.status == "shipped"

    def test_repeated_failures_cancel(self):
        order = _shipped_order()
        for _ in range(MAX_FAILED_DELIVERY_ATTEMPTS):
            order.record_delivery_attempt("failed", agent_id="agent-7")

        assert order.status == "cancelled"
        assert order.payment.status == PaymentStatus.CANCELLED.value
        recorded = [e for e in order._events if isinstance(e, DeliveryAttemptRecorded)]
        assert recorded[-1].failed_attempts == MAX_FAILED_DELIVERY_ATTEMPTS

    def test_attempt_requires_shipped_order(self):
        with pytest.raises(InvalidTransitionError):
            _place().record_delivery_attempt("failed")
