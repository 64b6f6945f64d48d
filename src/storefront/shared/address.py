"""Postal address value object used for billing and shipping."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from storefront.domain import storefront


@storefront.value_object
class Address:
    """An address captured on an order.

    Once recorded the address belongs to the order; later profile changes do
    not touch it.
    """

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100, default="India")

    @invariant.post
    def postal_code_must_be_alphanumeric(self):
        code = (self.postal_code or "").replace(" ", "").replace("-", "")
        if code and not code.isalnum():
            raise ValidationError({"postal_code": ["Postal code may only contain letters, digits, spaces and hyphens"]})

