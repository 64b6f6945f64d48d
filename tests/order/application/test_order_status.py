"""Order status changes, cancellation restock, address edits and delivery handoff."""

import json

import pytest
from protean import current_domain

from storefront.errors import (
    DomainValidationError,
    ForbiddenError,
    InvalidTransitionError,
    InvalidVerificationCodeError,
    OrderNotFoundError,
)
from storefront.order.addresses import UpdateOrderAddresses
from storefront.order.delivery import record_delivery_attempt
from storefront.order.order import Order
from storefront.order.queries import order_for_user
from storefront.order.status import CancelOrder, UpdateOrderStatus


@pytest.fixture()
def order_and_product(make_product, add_to_cart, place_order):
    product = make_product(quantity=10)
    add_to_cart("user-1", product.id, 3)
    return place_order("user-1"), product


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestAdminStatusUpdates:
    def test_skipping_ahead_is_rejected(self, order_and_product):
        order_id, _ = order_and_product
        with pytest.raises(InvalidTransitionError):
            current_domain.process(
                UpdateOrderStatus(order_id=order_id, status="shipped", tracking_number="TRK-9"),
                asynchronous=False,
            )
        assert _order(order_id).status == "pending"

    def test_full_lifecycle(self, order_and_product, advance_order):
        order_id, _ = order_and_product
        advance_order(order_id, "confirmed", "processing", "shipped", "delivered")

        order = _order(order_id)
        assert order.status == "delivered"
        assert order.tracking_number == "TRK-1001"
        assert order.payment.status == "cod_collected"

    def test_unknown_order(self):
        with pytest.raises(OrderNotFoundError):
            current_domain.process(UpdateOrderStatus(order_id="missing", status="confirmed"), asynchronous=False)

    def test_admin_cancel_restocks(self, order_and_product, advance_order, reload_product):
        order_id, product = order_and_product
        advance_order(order_id, "confirmed", "processing", "shipped")
        assert reload_product(product.id).inventory.quantity == 7

        advance_order(order_id, "cancelled")
        assert reload_product(product.id).inventory.quantity == 10


class TestCustomerCancel:
    def test_cancel_confirmed_order_restocks(self, order_and_product, advance_order, reload_product):
        order_id, product = order_and_product
        advance_order(order_id, "confirmed")

        status = current_domain.process(
            CancelOrder(order_id=order_id, user_id="user-1", reason="Ordered by mistake"),
            asynchronous=False,
        )
        assert status == "cancelled"
        assert _order(order_id).cancellation_reason == "Ordered by mistake"
        assert reload_product(product.id).inventory.quantity == 10

    def test_cannot_cancel_someone_elses_order(self, order_and_product):
        order_id, _ = order_and_product
        with pytest.raises(ForbiddenError):
            current_domain.process(CancelOrder(order_id=order_id, user_id="user-2"), asynchronous=False)

    def test_cannot_cancel_after_processing(self, order_and_product, advance_order, reload_product):
        order_id, product = order_and_product
        advance_order(order_id, "confirmed", "processing")
        with pytest.raises(InvalidTransitionError):
            current_domain.process(CancelOrder(order_id=order_id, user_id="user-1"), asynchronous=False)
        assert reload_product(product.id).inventory.quantity == 7

    def test_cancelled_order_restock_skips_deleted_product(self, order_and_product, reload_product):
        from storefront.catalogue.management import DeleteProduct

        order_id, product = order_and_product
        current_domain.process(DeleteProduct(product_id=product.id), asynchronous=False)
        current_domain.process(CancelOrder(order_id=order_id, user_id="user-1"), asynchronous=False)
        assert _order(order_id).status == "cancelled"


class TestAddressUpdate:
    def test_owner_updates_shipping(self, order_and_product, address):
        order_id, _ = order_and_product
        current_domain.process(
            UpdateOrderAddresses(
                order_id=order_id,
                user_id="user-1",
                shipping_address=json.dumps({**address, "city": "Chennai"}),
            ),
            asynchronous=False,
        )
        order = _order(order_id)
        assert order.shipping_address.city == "Chennai"
        assert order.summary.total == 1650.0

    def test_other_user_forbidden(self, order_and_product, address):
        order_id, _ = order_and_product
        with pytest.raises(ForbiddenError):
            current_domain.process(
                UpdateOrderAddresses(order_id=order_id, user_id="user-2", shipping_address=json.dumps(address)),
                asynchronous=False,
            )

    def test_not_editable_once_processing(self, order_and_product, advance_order, address):
        order_id, _ = order_and_product
        advance_order(order_id, "confirmed", "processing")
        with pytest.raises(DomainValidationError):
            current_domain.process(
                UpdateOrderAddresses(order_id=order_id, user_id="user-1", shipping_address=json.dumps(address)),
                asynchronous=False,
            )

    def test_requires_an_address(self, order_and_product):
        order_id, _ = order_and_product
        with pytest.raises(DomainValidationError):
            current_domain.process(UpdateOrderAddresses(order_id=order_id, user_id="user-1"), asynchronous=False)


class TestDeliveryHandoff:
    def test_code_match_delivers(self, order_and_product, advance_order):
        order_id, _ = order_and_product
        advance_order(order_id, "confirmed", "processing", "shipped")
        code = _order(order_id).payment.verification_code

        result = record_delivery_attempt(order_id, "delivered", verification_code=code, agent_id="agent-7")
        assert result["status"] == "delivered"
        assert result["accepted"] is True

    def test_mismatch_raises_after_recording(self, order_and_product, advance_order):
        order_id, _ = order_and_product
        advance_order(order_id, "confirmed", "processing", "shipped")

        with pytest.raises(InvalidVerificationCodeError):
            record_delivery_attempt(order_id, "delivered", verification_code="XXXXXX")

        order = _order(order_id)
        assert order.status == "shipped"
        assert len(order.delivery_attempts) == 1
        assert order.delivery_attempts[0].status == "failed"

    def test_three_failures_cancel_and_restock(self, order_and_product, advance_order, reload_product):
        order_id, product = order_and_product
        advance_order(order_id, "confirmed", "processing", "shipped")

        for _ in range(3):
            result = record_delivery_attempt(order_id, "failed", agent_id="agent-7")

        assert result["status"] == "cancelled"
        assert result["failed_attempts"] == 3
        assert reload_product(product.id).inventory.quantity == 10

    def test_order_for_user_admin_override(self, order_and_product):
        order_id, _ = order_and_product
        assert str(order_for_user(order_id, "admin-1", is_admin=True).id) == order_id
