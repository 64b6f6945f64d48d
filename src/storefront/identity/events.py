"""Domain events for user sign-up."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="PendingRegistration")
class RegistrationInitiated:
    """A sign-up was started; the code must be mailed to the address."""

    __version__ = 1

    email = String(required=True)
    name = String(required=True)
    verification_code = String(required=True)
    expires_at = DateTime(required=True)


@storefront.event(part_of="User")
class UserRegistered:
    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    name = String(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="User")
class UserProfileUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    name = String(required=True)
    phone = String()


@storefront.event(part_of="User")
class UserVerified:
    __version__ = 1

    user_id = Identifier(required=True)
    verified_by = Identifier()
    verified_at = DateTime(required=True)
