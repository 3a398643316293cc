"""Domain models for users."""

import re
from dataclasses import dataclass, field
from uuid import UUID

from recipe_planner.domain.enums import ActivityLevel, Allergen, Diet, Gender, Role
from recipe_planner.domain.errors import ValidationFailed

_EMAIL_PATTERN = re.compile(r"^[\w-]+(\.[\w-]+)*@([\w-]+\.)+[a-zA-Z]{2,7}$")
# At least six letters/digits, one of them a digit and one an uppercase letter.
_PASSWORD_PATTERN = re.compile(r"^(?=.*[0-9])(?=.*[A-ZÑ])[a-zA-Z0-9Ññ]{6,}$")
# bcrypt only hashes the first 72 bytes of a password.
_PASSWORD_MAX_BYTES = 72


def validate_email(email: str) -> str:
    """Return the trimmed email or raise when it is malformed."""
    cleaned = email.strip()
    if not _EMAIL_PATTERN.match(cleaned):
        raise ValidationFailed("Malformed email address", field="email")
    return cleaned


def validate_password(password: str) -> str:
    """Return the password or raise when it is too weak or too long."""
    if not _PASSWORD_PATTERN.match(password):
        raise ValidationFailed(
            "Password needs 6+ letters or digits, one digit and one uppercase letter",
            field="password",
        )
    if len(password.encode()) > _PASSWORD_MAX_BYTES:
        raise ValidationFailed(
            f"Password cannot be longer than {_PASSWORD_MAX_BYTES} bytes",
            field="password",
        )
    return password


@dataclass(frozen=True)
class DietaryProfile:
    """What a user cannot or will not eat."""

    allergies: list[Allergen] = field(default_factory=list)
    diet: Diet | None = None
    excluded_ingredients: list[UUID] = field(default_factory=list)


@dataclass(frozen=True)
class BiometricProfile:
    """Inputs for the energy requirement estimate."""

    gender: Gender | None = None
    weight: float | None = None
    height: float | None = None
    age: int | None = None
    activity_level: ActivityLevel | None = None


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database.

    The ``created_*``, ``favorite_recipes`` and ``saved_menus`` lists are
    denormalised copies of the owner references held by the other aggregates
    and are maintained by the services on create and delete.
    """

    id: UUID
    username: str
    name: str
    password_hash: str
    email: str
    role: Role = Role.REGULAR
    dietary: DietaryProfile = field(default_factory=DietaryProfile)
    biometrics: BiometricProfile = field(default_factory=BiometricProfile)
    created_ingredients: list[UUID] = field(default_factory=list)
    created_recipes: list[UUID] = field(default_factory=list)
    favorite_recipes: list[UUID] = field(default_factory=list)
    saved_menus: list[UUID] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Principal:
    """Authenticated identity resolved from a bearer token."""

    id: UUID
    username: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
