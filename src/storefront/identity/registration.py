"""Email-verified sign-up backed by an expiring PendingRegistration record.

A pending registration is keyed by email and lives in the repository, so it
survives restarts and is shared by every instance. Records past
``expires_at`` are treated as absent and removed by PurgeExpiredRegistrations.
"""

import secrets
from datetime import UTC, datetime, timedelta

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import RegistrationError
from storefront.identity.events import RegistrationInitiated
from storefront.identity.user import User, find_user_by_email

REGISTRATION_TTL = timedelta(minutes=10)
OTP_LENGTH = 6


def generate_otp() -> str:
    return "".join(secrets.choice("0123456789") for _ in range(OTP_LENGTH))


def _aware(value):
    return value.replace(tzinfo=UTC) if value is not None and value.tzinfo is None else value


@storefront.aggregate
class PendingRegistration:
    email = String(identifier=True, required=True, max_length=254)
    name = String(required=True, max_length=100)
    phone = String(max_length=30)
    verification_code = String(required=True, max_length=OTP_LENGTH)
    expires_at = DateTime(required=True)

    @classmethod
    def start(cls, email, name, phone=None, now=None):
        now = now or datetime.now(UTC)
        pending = cls(
            email=email,
            name=name,
            phone=phone,
            verification_code=generate_otp(),
            expires_at=now + REGISTRATION_TTL,
        )
        pending._announce()
        return pending

    def renew(self, name, phone=None, now=None):
        """Issue a fresh code and expiry, replacing the previous attempt."""
        now = now or datetime.now(UTC)
        self.name = name
        self.phone = phone
        self.verification_code = generate_otp()
        self.expires_at = now + REGISTRATION_TTL
        self._announce()

    def _announce(self):
        self.raise_(
            RegistrationInitiated(
                email=self.email,
                name=self.name,
                verification_code=self.verification_code,
                expires_at=self.expires_at,
            )
        )

    def is_expired(self, now=None) -> bool:
        return _aware(self.expires_at) <= (now or datetime.now(UTC))


@storefront.command(part_of="PendingRegistration")
class InitiateRegistration:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=30)


@storefront.command(part_of="PendingRegistration")
class VerifyRegistration:
    email = String(required=True, max_length=254)
    verification_code = String(required=True, max_length=OTP_LENGTH)


@storefront.command(part_of="PendingRegistration")
class PurgeExpiredRegistrations:
    as_of = DateTime()  # defaults to now


@storefront.command_handler(part_of=PendingRegistration)
class RegistrationHandler:
    @handle(InitiateRegistration)
    def initiate_registration(self, command):
        email = command.email.strip().lower()
        if find_user_by_email(email) is not None:
            raise RegistrationError({"email": [f"{email} is already registered"]})

        repo = current_domain.repository_for(PendingRegistration)
        try:
            pending = repo.get(email)
            pending.renew(name=command.name, phone=command.phone)
        except ObjectNotFoundError:
            pending = PendingRegistration.start(email=email, name=command.name, phone=command.phone)

        repo.add(pending)
        logger.info("Registration initiated", email=email, expires_at=pending.expires_at.isoformat())
        return email

    @handle(VerifyRegistration)
    def verify_registration(self, command):
        email = command.email.strip().lower()
        repo = current_domain.repository_for(PendingRegistration)
        try:
            pending = repo.get(email)
        except ObjectNotFoundError:
            raise RegistrationError({"email": [f"No pending registration for {email}"]}) from None

        if pending.is_expired():
            raise RegistrationError({"verification_code": ["Verification code has expired, start again"]})
        if pending.verification_code != command.verification_code.strip():
            raise RegistrationError({"verification_code": ["Verification code is incorrect"]})
        if find_user_by_email(email) is not None:
            raise RegistrationError({"email": [f"{email} is already registered"]})

        user = User.register(name=pending.name, email=email, phone=pending.phone)
        current_domain.repository_for(User).add(user)
        repo._dao.delete(pending)

        logger.info("Registration verified", email=email, user_id=str(user.id))
        return str(user.id)

    @handle(PurgeExpiredRegistrations)
    def purge_expired_registrations(self, command):
        repo = current_domain.repository_for(PendingRegistration)
        cutoff = _aware(command.as_of) or datetime.now(UTC)
        expired = repo._dao.query.filter(expires_at__lte=cutoff).limit(None).all().items
        for pending in expired:
            repo._dao.delete(pending)

        if expired:
            logger.info("Expired registrations purged", count=len(expired))
        return len(expired)
