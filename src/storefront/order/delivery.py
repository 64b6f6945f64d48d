"""Delivery handoff — the delivery agent reports each attempt on a shipped order.

A ``delivered`` report must carry the order's verification code. A wrong
code is still written to the attempt history as ``failed`` before the
caller gets InvalidVerificationCodeError, so the handler commits first and
``record_delivery_attempt`` raises afterwards.
"""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import InvalidVerificationCodeError
from storefront.order.order import DeliveryOutcome, Order, OrderStatus
from storefront.order.queries import get_order
from storefront.order.status import restock_cancelled


@storefront.command(part_of="Order")
class RecordDeliveryAttempt:
    order_id = Identifier(required=True)
    outcome = String(required=True, choices=DeliveryOutcome)
    verification_code = String(max_length=20)
    agent_id = String(max_length=100)
    notes = Text()


@storefront.command_handler(part_of=Order)
class RecordDeliveryAttemptHandler:
    @handle(RecordDeliveryAttempt)
    def record_delivery_attempt(self, command):
        order = get_order(command.order_id)
        accepted = order.record_delivery_attempt(
            command.outcome,
            verification_code=command.verification_code,
            agent_id=command.agent_id,
            notes=command.notes,
        )
        if OrderStatus(order.status) == OrderStatus.CANCELLED:
            logger.warning(
                "Order cancelled after repeated failed deliveries",
                order_id=str(order.id),
                failed_attempts=order.failed_delivery_attempts,
            )
            restock_cancelled(order)

        current_domain.repository_for(Order).add(order)

        return {
            "order_id": str(order.id),
            "status": order.status,
            "accepted": accepted,
            "failed_attempts": order.failed_delivery_attempts,
        }


def record_delivery_attempt(order_id, outcome, verification_code=None, agent_id=None, notes=None) -> dict:
    """Record an attempt and raise InvalidVerificationCodeError once a refused handoff is stored."""
    result = current_domain.process(
        RecordDeliveryAttempt(
            order_id=order_id,
            outcome=outcome,
            verification_code=verification_code,
            agent_id=agent_id,
            notes=notes,
        ),
        asynchronous=False,
    )
    if not result["accepted"]:
        raise InvalidVerificationCodeError(order_id)
    return result
