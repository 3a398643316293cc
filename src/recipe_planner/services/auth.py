"""Bearer-token authentication and owner/admin authorization."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from recipe_planner.domain.errors import Forbidden, Unauthenticated
from recipe_planner.domain.users import Principal

if TYPE_CHECKING:
    from recipe_planner.services.users import UserRepository

_logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """Raised by token services when a token cannot be trusted."""


class TokenService(Protocol):
    """Issues and verifies signed bearer tokens."""

    def sign(self, claims: dict[str, object]) -> str:
        """Return a signed token carrying the claims."""

    def verify(self, token: str) -> dict[str, object]:
        """Return the claims of a valid token or raise InvalidTokenError."""


class PasswordHasher(Protocol):
    """One-way password hashing."""

    def hash(self, password: str) -> str:
        """Return a salted hash of the password."""

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True when the password matches the hash."""


def authorize(principal: Principal, owner_id: UUID) -> None:
    """Allow admins and the resource owner, reject everyone else."""
    if principal.is_admin or principal.id == owner_id:
        return
    raise Forbidden("Only the owner or an administrator may modify this resource")


def require_admin(principal: Principal) -> None:
    """Reject principals without the administrator role."""
    if not principal.is_admin:
        raise Forbidden("Administrator role required")


@dataclass
class AccessGuard:
    """Resolves bearer tokens to principals."""

    user_repository: "UserRepository"
    token_service: TokenService

    async def authenticate(self, token: str | None) -> Principal:
        """Return the principal for a token, raising Unauthenticated otherwise."""
        if not token:
            raise Unauthenticated("Missing authorization token")
        try:
            claims = self.token_service.verify(token)
            user_id = UUID(str(claims["sub"]))
        except (InvalidTokenError, KeyError, ValueError) as exc:
            _logger.info("Rejected bearer token: %s", exc)
            raise Unauthenticated("Invalid or expired token") from exc
        user = await self.user_repository.get_user(user_id)
        if user is None:
            raise Unauthenticated("Token does not belong to an existing user")
        return Principal(id=user.id, username=user.username, role=user.role)

    @staticmethod
    def authorize(principal: Principal, owner_id: UUID) -> None:
        """Allow admins and the resource owner."""
        authorize(principal, owner_id)


def parse_bearer(header: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]
