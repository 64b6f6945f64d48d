"""FastAPI endpoints for the caller's own profile."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import Principal, current_principal
from storefront.api.schemas import UpdateProfileRequest
from storefront.api.serializers import user_to_dict
from storefront.identity.profile import UpdateUserProfile
from storefront.identity.queries import get_user

user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.get("/me")
async def get_profile(principal: Principal = Depends(current_principal)) -> dict:
    return user_to_dict(get_user(principal.user_id))


@user_router.put("/me")
async def update_profile(body: UpdateProfileRequest, principal: Principal = Depends(current_principal)) -> dict:
    command = UpdateUserProfile(user_id=principal.user_id, name=body.name, phone=body.phone)
    current_domain.process(command, asynchronous=False)
    return user_to_dict(get_user(principal.user_id))
