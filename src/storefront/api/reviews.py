"""FastAPI endpoints for product reviews."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import Principal, current_principal, require_admin
from storefront.api.schemas import (
    EditReviewRequest,
    ModerateReviewRequest,
    ReviewIdResponse,
    StatusResponse,
    SubmitReviewRequest,
)
from storefront.api.serializers import review_to_dict
from storefront.reviews.deletion import DeleteReview
from storefront.reviews.editing import EditReview
from storefront.reviews.moderation import ModerateReview
from storefront.reviews.queries import get_review, list_product_reviews, list_reviews_by_status
from storefront.reviews.submission import SubmitReview
from storefront.reviews.voting import ToggleHelpfulVote

review_router = APIRouter(prefix="/reviews", tags=["reviews"])


def _json_list(values):
    if values is None:
        return None
    return json.dumps([v.model_dump() if hasattr(v, "model_dump") else v for v in values])


@review_router.post("", status_code=201, response_model=ReviewIdResponse)
async def submit_review(body: SubmitReviewRequest, principal: Principal = Depends(current_principal)) -> ReviewIdResponse:
    command = SubmitReview(
        user_id=principal.user_id,
        product_id=body.product_id,
        rating=body.rating,
        title=body.title,
        content=body.content,
        pros=_json_list(body.pros),
        cons=_json_list(body.cons),
        images=_json_list(body.images),
        device_info=body.device_info,
    )
    result = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=result)


@review_router.get("/product/{product_id}")
async def get_product_reviews(product_id: str, rating: int | None = None, page: int = 1, limit: int = 10) -> dict:
    result = list_product_reviews(product_id, rating=rating, page=page, limit=limit)
    return {**result, "reviews": [review_to_dict(r) for r in result["reviews"]]}


@review_router.get("/moderation", dependencies=[Depends(require_admin)])
async def get_reviews_for_moderation(status: str = "pending", page: int = 1, limit: int = 10) -> dict:
    result = list_reviews_by_status(status, page=page, limit=limit)
    return {**result, "reviews": [review_to_dict(r) for r in result["reviews"]]}


@review_router.get("/{review_id}")
async def get_review_detail(review_id: str) -> dict:
    return review_to_dict(get_review(review_id))


@review_router.put("/{review_id}", response_model=StatusResponse)
async def edit_review(
    review_id: str,
    body: EditReviewRequest,
    principal: Principal = Depends(current_principal),
) -> StatusResponse:
    command = EditReview(
        review_id=review_id,
        user_id=principal.user_id,
        rating=body.rating,
        title=body.title,
        content=body.content,
        pros=_json_list(body.pros),
        cons=_json_list(body.cons),
        images=_json_list(body.images),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="pending")


@review_router.put("/{review_id}/moderate", response_model=StatusResponse)
async def moderate_review(
    review_id: str,
    body: ModerateReviewRequest,
    principal: Principal = Depends(require_admin),
) -> StatusResponse:
    command = ModerateReview(
        review_id=review_id,
        status=body.status,
        moderated_by=principal.user_id,
        admin_comment=body.admin_comment,
    )
    result = current_domain.process(command, asynchronous=False)
    return StatusResponse(status=result)


@review_router.post("/{review_id}/helpful")
async def toggle_helpful(review_id: str, principal: Principal = Depends(current_principal)) -> dict:
    command = ToggleHelpfulVote(review_id=review_id, user_id=principal.user_id)
    return current_domain.process(command, asynchronous=False)


@review_router.delete("/{review_id}", response_model=StatusResponse)
async def delete_review(review_id: str, principal: Principal = Depends(current_principal)) -> StatusResponse:
    command = DeleteReview(review_id=review_id, user_id=principal.user_id, is_admin=principal.is_admin)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="deleted")
