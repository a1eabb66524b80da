from dataclasses import dataclass
from typing import Optional

from src.errors import AuthorizationError
from src.users.schemas import UserRole


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    role: UserRole


@dataclass(frozen=True)
class AuthContext:
    """Who is calling. Passed explicitly to every service operation."""

    user: Optional[Identity] = None

    def current_user(self) -> Optional[Identity]:
        return self.user

    def has_role(self, role: UserRole) -> bool:
        return self.user is not None and self.user.role == role

    @property
    def is_admin(self) -> bool:
        return self.has_role(UserRole.ADMIN)

    def require_authenticated(self) -> Identity:
        if self.user is None:
            raise AuthorizationError("Not authenticated")
        return self.user

    def require_admin(self) -> Identity:
        user = self.require_authenticated()
        if user.role != UserRole.ADMIN:
            raise AuthorizationError("Not authorized. Admin only")
        return user

    def require_self_or_admin(self, target_id: str) -> Identity:
        user = self.require_authenticated()
        if user.role != UserRole.ADMIN and user.id != target_id:
            raise AuthorizationError("Not authorized to access this employee")
        return user


ANONYMOUS = AuthContext()
