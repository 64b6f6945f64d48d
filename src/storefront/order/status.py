"""Order status changes — admin transitions and customer cancellation.

Any transition into ``cancelled`` returns every line to stock through the
ledger in the same unit of work.
"""

from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.inventory.ledger import InventoryLedger
from storefront.order.order import Order, OrderStatus
from storefront.order.queries import get_order, order_for_user


def restock_cancelled(order):
    """Reverse the placement decrements of a cancelled order."""
    InventoryLedger().restock(order.stock_lines())
    logger.info("Cancelled order restocked", order_id=str(order.id), lines=len(order.items))


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    changed_by = String(max_length=100)
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()
    reason = String(max_length=500)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(max_length=500)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        order = get_order(command.order_id)
        order.transition_to(
            command.status,
            changed_by=command.changed_by,
            tracking_number=command.tracking_number,
            estimated_delivery=command.estimated_delivery,
            reason=command.reason,
        )
        if OrderStatus(order.status) == OrderStatus.CANCELLED:
            restock_cancelled(order)

        current_domain.repository_for(Order).add(order)
        return order.status

    @handle(CancelOrder)
    def cancel_order(self, command):
        order = order_for_user(command.order_id, command.user_id)
        order.cancel_by_customer(command.user_id, reason=command.reason)
        restock_cancelled(order)

        current_domain.repository_for(Order).add(order)
        return order.status
