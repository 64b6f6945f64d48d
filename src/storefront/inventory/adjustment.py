"""Manual stock adjustment (restock, shrinkage, corrections) — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String

from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.inventory.ledger import InventoryLedger


@storefront.command(part_of="Product")
class AdjustStock:
    product_id = Identifier(required=True)
    delta = Integer(required=True)
    reason = String(max_length=255)


@storefront.command_handler(part_of=Product)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        product = InventoryLedger().adjust_stock(command.product_id, command.delta)
        logger.info(
            "Manual stock adjustment",
            product_id=str(command.product_id),
            delta=command.delta,
            reason=command.reason,
        )
        return product.inventory.quantity
