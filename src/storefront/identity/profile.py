"""User profile upkeep: self-service profile edits and admin verification."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.identity.queries import get_user
from storefront.identity.user import User


@storefront.command(part_of="User")
class UpdateUserProfile:
    user_id = Identifier(required=True)
    name = String(max_length=100)
    phone = String(max_length=30)


@storefront.command(part_of="User")
class VerifyUser:
    user_id = Identifier(required=True)
    verified_by = Identifier()


@storefront.command_handler(part_of=User)
class UserProfileHandler:
    @handle(UpdateUserProfile)
    def update_profile(self, command):
        user = get_user(command.user_id)
        user.update_profile(name=command.name, phone=command.phone)
        current_domain.repository_for(User).add(user)

    @handle(VerifyUser)
    def verify_user(self, command):
        """Mark a user verified by hand; already verified users are left alone."""
        user = get_user(command.user_id)
        if user.verify(verified_by=command.verified_by):
            current_domain.repository_for(User).add(user)
            logger.info("User verified", user_id=str(user.id), verified_by=command.verified_by)
        return user.is_verified
