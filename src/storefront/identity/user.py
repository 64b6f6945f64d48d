"""User aggregate — the identity other aggregates reference by id.

Passwords, tokens and OAuth are handled upstream; this record only carries
what orders and notifications need.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.events import UserProfileUpdated, UserRegistered, UserVerified


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@storefront.aggregate
class User:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=30)
    role = String(choices=Role, default=Role.USER.value)
    is_verified = Boolean(default=False)
    created_at = DateTime()

    @classmethod
    def register(cls, name, email, phone=None, role=Role.USER.value):
        now = datetime.now(UTC)
        user = cls(
            name=name,
            email=email.strip().lower(),
            phone=phone,
            role=role,
            is_verified=True,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email,
                name=name,
                registered_at=now,
            )
        )
        return user

    def update_profile(self, name=None, phone=None):
        """Change the display name and/or phone; the email is the identity and stays."""
        if name is not None:
            self.name = name.strip()
        if phone is not None:
            self.phone = phone.strip() or None
        self.raise_(UserProfileUpdated(user_id=str(self.id), name=self.name, phone=self.phone))

    def verify(self, verified_by=None):
        if self.is_verified:
            return False
        self.is_verified = True
        self.raise_(UserVerified(user_id=str(self.id), verified_by=verified_by, verified_at=datetime.now(UTC)))
        return True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


def find_user(user_id) -> User | None:
    try:
        return current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        return None


def find_user_by_email(email) -> User | None:
    matches = current_domain.repository_for(User)._dao.query.filter(email=email.strip().lower()).all().items
    return matches[0] if matches else None
