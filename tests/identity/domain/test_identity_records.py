from datetime import UTC, datetime, timedelta

from storefront.identity.events import RegistrationInitiated, UserProfileUpdated, UserRegistered, UserVerified
from storefront.identity.registration import OTP_LENGTH, REGISTRATION_TTL, PendingRegistration
from storefront.identity.user import Role, User


class TestUser:
    def test_register_normalises_email(self):
        user = User.register(name="Asha Rao", email=" Asha@Example.COM ")
        assert user.email == "asha@example.com"
        assert user.role == Role.USER.value
        assert user.is_verified is True
        assert not user.is_admin
        assert isinstance(user._events[-1], UserRegistered)

    def test_admin_role(self):
        assert User.register(name="Ops", email="ops@example.com", role=Role.ADMIN.value).is_admin

    def test_update_profile_keeps_email(self):
        user = User.register(name="Asha Rao", email="asha@example.com", phone="98450 00000")
        user.update_profile(name=" Asha R. ", phone="")
        assert user.name == "Asha R."
        assert user.phone is None
        assert user.email == "asha@example.com"
        assert isinstance(user._events[-1], UserProfileUpdated)

    def test_verify_once(self):
        user = User(name="Ravi", email="ravi@example.com", is_verified=False)
        assert user.verify(verified_by="admin-1") is True
        assert isinstance(user._events[-1], UserVerified)
        assert user.verify(verified_by="admin-1") is False
        assert len([e for e in user._events if isinstance(e, UserVerified)]) == 1


class TestPendingRegistration:
    def test_start_issues_code_and_expiry(self):
        now = datetime.now(UTC)
        pending = PendingRegistration.start(email="asha@example.com", name="Asha Rao", now=now)
        assert len(pending.verification_code) == OTP_LENGTH
        assert pending.expires_at == now + REGISTRATION_TTL
        assert isinstance(pending._events[-1], RegistrationInitiated)

    def test_expiry(self):
        now = datetime.now(UTC)
        pending = PendingRegistration.start(email="asha@example.com", name="Asha Rao", now=now)
        assert not pending.is_expired(now + REGISTRATION_TTL - timedelta(seconds=1))
        assert pending.is_expired(now + REGISTRATION_TTL)

    def test_renew_moves_expiry(self):
        start = datetime.now(UTC) - timedelta(hours=1)
        pending = PendingRegistration.start(email="asha@example.com", name="Asha Rao", now=start)
        pending.renew(name="Asha R.")
        assert not pending.is_expired()
        assert pending.name == "Asha R."
