"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the internal Protean
commands they are translated into.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str = Field("India", max_length=100)


class ReviewImageSchema(BaseModel):
    url: str = Field(..., max_length=500)
    caption: str | None = Field(None, max_length=200)


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Cotton Kurta",
                    "base_price": 1299.0,
                    "discount_percent": 10.0,
                    "quantity": 25,
                    "brand": "Fabindia",
                    "category_id": "cat-apparel",
                    "specifications": {"material": "cotton", "fit": "regular"},
                }
            ]
        }
    }

    name: str = Field(..., max_length=200)
    base_price: float = Field(..., ge=0)
    discount_percent: float = Field(0.0, ge=0, le=100)
    quantity: int = Field(0, ge=0)
    brand: str | None = Field(None, max_length=100)
    description: str | None = None
    category_id: str | None = None
    specifications: dict | None = None


class UpdateProductDetailsRequest(BaseModel):
    name: str | None = Field(None, max_length=200)
    brand: str | None = Field(None, max_length=100)
    description: str | None = None
    category_id: str | None = None
    specifications: dict | None = None


class UpdateProductPriceRequest(BaseModel):
    base_price: float | None = Field(None, ge=0)
    discount_percent: float | None = Field(None, ge=0, le=100)


class AdjustStockRequest(BaseModel):
    delta: int
    reason: str | None = Field(None, max_length=255)


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., max_length=100)
    parent_id: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    parent_id: str | None = Field(None, description="Empty string moves the category to the top level")


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    selected_specs: dict | None = None


class UpdateCartQuantityRequest(BaseModel):
    quantity: int = Field(..., ge=0)
    selected_specs: dict | None = None


class ApplyCouponRequest(BaseModel):
    code: str = Field(..., max_length=50)


class CreateCouponRequest(BaseModel):
    code: str = Field(..., max_length=50)
    discount_percentage: float = Field(..., ge=0, le=100)
    expires_at: datetime | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "billing_address": {
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "postal_code": "560001",
                        "country": "India",
                    },
                    "shipping_address": {
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "postal_code": "560001",
                        "country": "India",
                    },
                    "billing_name": "Asha Rao",
                    "billing_email": "asha@example.com",
                    "shipping_method": "standard",
                }
            ]
        }
    }

    billing_address: AddressSchema
    shipping_address: AddressSchema
    billing_name: str | None = Field(None, max_length=200)
    billing_email: str | None = Field(None, max_length=254)
    billing_phone: str | None = Field(None, max_length=30)
    shipping_method: str = "standard"
    notes: str | None = None
    source: str = "web"


class UpdateOrderAddressesRequest(BaseModel):
    billing_address: AddressSchema | None = None
    shipping_address: AddressSchema | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class UpdateOrderStatusRequest(BaseModel):
    status: str
    tracking_number: str | None = Field(None, max_length=100)
    estimated_delivery: datetime | None = None
    reason: str | None = Field(None, max_length=500)


class DeliveryAttemptRequest(BaseModel):
    outcome: str
    verification_code: str | None = Field(None, max_length=20)
    notes: str | None = None


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    product_id: str
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., max_length=100)
    content: str = Field(..., max_length=1000)
    pros: list[str] | None = None
    cons: list[str] | None = None
    images: list[ReviewImageSchema] | None = None
    device_info: str | None = Field(None, max_length=255)


class EditReviewRequest(BaseModel):
    rating: int | None = Field(None, ge=1, le=5)
    title: str | None = Field(None, max_length=100)
    content: str | None = Field(None, max_length=1000)
    pros: list[str] | None = None
    cons: list[str] | None = None
    images: list[ReviewImageSchema] | None = None


class ModerateReviewRequest(BaseModel):
    status: str
    admin_comment: str | None = None


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------
class WishlistItemRequest(BaseModel):
    product_id: str


class WishlistNotificationsRequest(BaseModel):
    price_drops: bool | None = None
    back_in_stock: bool | None = None


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class RegisterRequest(BaseModel):
    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    phone: str | None = Field(None, max_length=30)


class VerifyRegistrationRequest(BaseModel):
    email: str = Field(..., max_length=254)
    verification_code: str = Field(..., max_length=6)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class UpdateProfileRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=30)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ProductIdResponse(BaseModel):
    product_id: str


class CategoryIdResponse(BaseModel):
    category_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class ReviewIdResponse(BaseModel):
    review_id: str


class UserIdResponse(BaseModel):
    user_id: str
