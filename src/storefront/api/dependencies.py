"""Request identity, as asserted by the upstream auth gateway."""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

from storefront.identity.user import Role


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str = Role.USER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


def current_principal(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=Role.USER.value),
) -> Principal:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return Principal(user_id=x_user_id, role=x_user_role.lower())


def require_admin(principal: Principal = Depends(current_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return principal
