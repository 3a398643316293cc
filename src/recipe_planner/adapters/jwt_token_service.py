"""PyJWT-backed bearer token service."""

from dataclasses import dataclass

import jwt

from recipe_planner.services.auth import InvalidTokenError, TokenService


@dataclass
class PyJwtTokenService(TokenService):
    """Signs and verifies HMAC JSON Web Tokens."""

    secret: str
    algorithm: str = "HS256"

    def sign(self, claims: dict[str, object]) -> str:
        """Return a signed token carrying the claims."""
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, object]:
        """Return the claims of a valid, unexpired token."""
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc
