"""Coupons — the Coupon aggregate and applying one to a cart."""

from datetime import UTC, datetime

from protean import handle, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import cart_for
from storefront.domain import storefront
from storefront.errors import NotFoundError
from storefront.shared.pricing import coupon_is_active


@storefront.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    discount_percentage = Float(required=True, min_value=0.0, max_value=100.0)
    expires_at = DateTime()
    is_active = Boolean(default=True)
    created_at = DateTime()

    @invariant.post
    def code_must_be_uppercase(self):
        if self.code and self.code != self.code.upper():
            raise ValidationError({"code": ["Coupon codes are stored in upper case"]})

    @classmethod
    def create(cls, code, discount_percentage, expires_at=None):
        return cls(
            code=code.strip().upper(),
            discount_percentage=discount_percentage,
            expires_at=expires_at,
            is_active=True,
            created_at=datetime.now(UTC),
        )

    def is_redeemable(self, now=None) -> bool:
        return bool(self.is_active) and coupon_is_active(self.expires_at, now)


def find_coupon(code) -> Coupon | None:
    matches = current_domain.repository_for(Coupon)._dao.query.filter(code=code.strip().upper()).all().items
    return matches[0] if matches else None


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    discount_percentage = Float(required=True, min_value=0.0, max_value=100.0)
    expires_at = DateTime()


@storefront.command(part_of="ShoppingCart")
class ApplyCouponToCart:
    user_id = Identifier(required=True)
    code = String(required=True, max_length=50)


@storefront.command(part_of="ShoppingCart")
class RemoveCouponFromCart:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Coupon)
class CreateCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        if find_coupon(command.code) is not None:
            raise ValidationError({"code": [f"Coupon {command.code.upper()} already exists"]})

        coupon = Coupon.create(
            code=command.code,
            discount_percentage=command.discount_percentage,
            expires_at=command.expires_at,
        )
        current_domain.repository_for(Coupon).add(coupon)
        return str(coupon.id)


@storefront.command_handler(part_of=ShoppingCart)
class CartCouponHandler:
    @handle(ApplyCouponToCart)
    def apply_coupon_to_cart(self, command):
        coupon = find_coupon(command.code)
        if coupon is None:
            raise NotFoundError({"code": [f"Coupon {command.code} not found"]})
        if not coupon.is_redeemable():
            raise ValidationError({"code": [f"Coupon {coupon.code} is no longer valid"]})

        cart = cart_for(command.user_id)
        cart.apply_coupon(coupon.code, coupon.discount_percentage, coupon.expires_at)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveCouponFromCart)
    def remove_coupon_from_cart(self, command):
        cart = cart_for(command.user_id, create=False)
        if cart is None:
            return
        cart.remove_coupon()
        current_domain.repository_for(ShoppingCart).add(cart)
