"""FastAPI endpoints for the back office: dashboard and user management."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.admin.dashboard import dashboard_stats
from storefront.api.dependencies import Principal, require_admin
from storefront.api.serializers import order_to_dict, user_to_dict
from storefront.identity.profile import VerifyUser
from storefront.identity.queries import get_user, list_users

admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@admin_router.get("/dashboard")
async def get_dashboard() -> dict:
    stats = dashboard_stats()
    return {
        "statistics": stats["statistics"],
        "recent_orders": [order_to_dict(o, include_verification_code=True) for o in stats["recent_orders"]],
    }


@admin_router.get("/users")
async def get_users(role: str | None = None, page: int = 1, limit: int = 20) -> dict:
    result = list_users(role=role, page=page, limit=limit)
    return {**result, "users": [user_to_dict(u) for u in result["users"]]}


@admin_router.post("/users/{user_id}/verify")
async def verify_user(user_id: str, principal: Principal = Depends(require_admin)) -> dict:
    current_domain.process(VerifyUser(user_id=user_id, verified_by=principal.user_id), asynchronous=False)
    return user_to_dict(get_user(user_id))
