"""FastAPI endpoints for placing and following cash-on-delivery orders."""

import json

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from storefront.api.dependencies import Principal, current_principal, require_admin
from storefront.api.schemas import (
    CancelOrderRequest,
    DeliveryAttemptRequest,
    PlaceOrderRequest,
    UpdateOrderAddressesRequest,
    UpdateOrderStatusRequest,
)
from storefront.api.serializers import order_to_dict
from storefront.order.addresses import UpdateOrderAddresses
from storefront.order.delivery import record_delivery_attempt
from storefront.order.placement import PlaceOrder
from storefront.order.queries import get_order, list_orders, order_for_user
from storefront.order.status import CancelOrder, UpdateOrderStatus

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _view(order, principal: Principal) -> dict:
    return order_to_dict(order, include_verification_code=principal.is_admin)


@order_router.post("", status_code=201)
async def place_order(
    body: PlaceOrderRequest,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict:
    """Turn the caller's cart into an order, reserving stock and emptying the cart."""
    command = PlaceOrder(
        user_id=principal.user_id,
        billing_address=json.dumps(body.billing_address.model_dump()),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        billing_name=body.billing_name,
        billing_email=body.billing_email,
        billing_phone=body.billing_phone,
        shipping_method=body.shipping_method,
        notes=body.notes,
        source=body.source,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _view(get_order(order_id), principal)


@order_router.get("")
async def get_orders(
    status: str | None = None,
    page: int = 1,
    limit: int = 10,
    principal: Principal = Depends(current_principal),
) -> dict:
    """The caller's orders; admins see every order."""
    result = list_orders(
        user_id=None if principal.is_admin else principal.user_id,
        status=status,
        page=page,
        limit=limit,
    )
    return {**result, "orders": [_view(o, principal) for o in result["orders"]]}


@order_router.get("/{order_id}")
async def get_order_detail(order_id: str, principal: Principal = Depends(current_principal)) -> dict:
    order = order_for_user(order_id, principal.user_id, is_admin=principal.is_admin)
    return _view(order, principal)


@order_router.put("/{order_id}/addresses")
async def update_order_addresses(
    order_id: str,
    body: UpdateOrderAddressesRequest,
    principal: Principal = Depends(current_principal),
) -> dict:
    command = UpdateOrderAddresses(
        order_id=order_id,
        user_id=principal.user_id,
        billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
    )
    current_domain.process(command, asynchronous=False)
    return _view(get_order(order_id), principal)


@order_router.post("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest,
    principal: Principal = Depends(current_principal),
) -> dict:
    command = CancelOrder(order_id=order_id, user_id=principal.user_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return _view(get_order(order_id), principal)


@order_router.put("/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    principal: Principal = Depends(require_admin),
) -> dict:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        changed_by=principal.user_id,
        tracking_number=body.tracking_number,
        estimated_delivery=body.estimated_delivery,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return _view(get_order(order_id), principal)


@order_router.post("/{order_id}/delivery-attempts")
async def add_delivery_attempt(
    order_id: str,
    body: DeliveryAttemptRequest,
    principal: Principal = Depends(require_admin),
) -> dict:
    """Record a handoff attempt by the delivery agent."""
    return record_delivery_attempt(
        order_id,
        body.outcome,
        verification_code=body.verification_code,
        agent_id=principal.user_id,
        notes=body.notes,
    )
