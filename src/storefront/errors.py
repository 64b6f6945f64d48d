"""Storefront error taxonomy.

Every failure a caller can see maps to one class here, each with a stable
machine-readable ``code`` and the HTTP status the API answers with. The
classes extend Protean's own exceptions, so framework code and tests that
catch ``ValidationError`` or ``ObjectNotFoundError`` keep working.

Messages follow Protean's shape: ``{"field": ["human readable message"]}``.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class StorefrontError:
    """Mixin carrying the stable error code and HTTP status."""

    code = "storefront_error"
    status_code = 400

    @property
    def message(self) -> str:
        for messages in self.messages.values():
            if messages:
                return messages[0] if isinstance(messages, list) else str(messages)
        return self.code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "errors": dict(self.messages)}


# ---------------------------------------------------------------------------
# Absent entities
# ---------------------------------------------------------------------------
class NotFoundError(StorefrontError, ObjectNotFoundError):
    code = "not_found"
    status_code = 404


class ProductNotFoundError(NotFoundError):
    code = "product_not_found"

    def __init__(self, product_id):
        super().__init__({"product_id": [f"Product {product_id} not found"]})


class ItemNotFoundError(NotFoundError):
    code = "item_not_found"

    def __init__(self, product_id, container="cart"):
        super().__init__({"product_id": [f"Product {product_id} is not in the {container}"]})


class OrderNotFoundError(NotFoundError):
    code = "order_not_found"

    def __init__(self, order_id):
        super().__init__({"order_id": [f"Order {order_id} not found"]})


class ReviewNotFoundError(NotFoundError):
    code = "review_not_found"

    def __init__(self, review_id):
        super().__init__({"review_id": [f"Review {review_id} not found"]})


# ---------------------------------------------------------------------------
# Rejected operations
# ---------------------------------------------------------------------------
class DomainValidationError(StorefrontError, ValidationError):
    code = "validation_error"
    status_code = 400


class InsufficientStockError(DomainValidationError):
    code = "insufficient_stock"
    status_code = 409

    def __init__(self, product_id, available, requested):
        super().__init__(
            {
                "quantity": [
                    f"Insufficient stock for product {product_id}: {available} available, {requested} requested"
                ]
            }
        )
        self.product_id = str(product_id)
        self.available = available
        self.requested = requested


class StockUnavailableError(DomainValidationError):
    code = "stock_unavailable"
    status_code = 409

    def __init__(self, product_id, product_name=None):
        label = f"'{product_name}'" if product_name else str(product_id)
        super().__init__({"items": [f"Product {label} is no longer available in the requested quantity"]})
        self.product_id = str(product_id)


class InvalidTransitionError(DomainValidationError):
    code = "invalid_transition"
    status_code = 409

    def __init__(self, current, target):
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})
        self.current = current
        self.target = target


class InvalidVerificationCodeError(DomainValidationError):
    code = "invalid_verification_code"
    status_code = 400

    def __init__(self, order_id):
        super().__init__({"verification_code": [f"Verification code does not match order {order_id}"]})


class LimitExceededError(DomainValidationError):
    code = "cod_limit_exceeded"
    status_code = 422

    def __init__(self, total, limit):
        super().__init__(
            {"total": [f"Order total {total:.2f} exceeds the cash-on-delivery limit of {limit:.2f}"]}
        )
        self.total = total
        self.limit = limit


class DuplicateReviewError(DomainValidationError):
    code = "duplicate_review"
    status_code = 409

    def __init__(self, product_id):
        super().__init__({"review": [f"You have already reviewed product {product_id}"]})


class NotPurchasedError(DomainValidationError):
    code = "not_purchased"
    status_code = 403

    def __init__(self, product_id):
        super().__init__({"review": [f"Product {product_id} has no delivered order for this user"]})


class EmptyCartError(DomainValidationError):
    code = "empty_cart"
    status_code = 400

    def __init__(self):
        super().__init__({"cart": ["Cannot place an order from an empty cart"]})


class ForbiddenError(DomainValidationError):
    code = "forbidden"
    status_code = 403


class RegistrationError(DomainValidationError):
    code = "registration_error"
    status_code = 400


DOMAIN_ERRORS = (
    NotFoundError,
    ProductNotFoundError,
    ItemNotFoundError,
    OrderNotFoundError,
    ReviewNotFoundError,
    DomainValidationError,
    InsufficientStockError,
    StockUnavailableError,
    InvalidTransitionError,
    InvalidVerificationCodeError,
    LimitExceededError,
    DuplicateReviewError,
    NotPurchasedError,
    EmptyCartError,
    ForbiddenError,
    RegistrationError,
)
