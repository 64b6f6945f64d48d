"""FastAPI endpoints for email-verified sign-up."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from storefront.api.schemas import RegisterRequest, StatusResponse, UserIdResponse, VerifyRegistrationRequest
from storefront.identity.registration import InitiateRegistration, VerifyRegistration

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", status_code=202, response_model=StatusResponse)
async def register(body: RegisterRequest) -> StatusResponse:
    """Start a sign-up; a verification code is mailed to the address."""
    command = InitiateRegistration(name=body.name, email=body.email, phone=body.phone)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="verification_sent")


@auth_router.post("/verify", status_code=201, response_model=UserIdResponse)
async def verify(body: VerifyRegistrationRequest) -> UserIdResponse:
    command = VerifyRegistration(email=body.email, verification_code=body.verification_code)
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)
