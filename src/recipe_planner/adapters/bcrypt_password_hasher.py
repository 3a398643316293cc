"""bcrypt-backed password hashing."""

from dataclasses import dataclass

import bcrypt

from recipe_planner.services.auth import PasswordHasher


@dataclass
class BcryptPasswordHasher(PasswordHasher):
    """Salted bcrypt hashes with a configurable work factor."""

    rounds: int = 10

    def hash(self, password: str) -> str:
        """Return the bcrypt hash of the password."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True when the password matches the stored hash."""
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except ValueError:
            return False
