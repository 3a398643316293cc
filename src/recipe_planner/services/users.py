"""User registration, login and profile management."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from recipe_planner.domain.enums import (
    ActivityLevel,
    Allergen,
    Diet,
    Gender,
    Role,
    parse_enum,
    parse_enum_list,
)
from recipe_planner.domain.errors import (
    Conflict,
    Forbidden,
    NotFound,
    Unauthenticated,
    ValidationFailed,
)
from recipe_planner.domain.users import (
    Principal,
    UserRecord,
    validate_email,
    validate_password,
)
from recipe_planner.services.auth import (
    PasswordHasher,
    TokenService,
    authorize,
    require_admin,
)
from recipe_planner.services.integrity import ReferenceGuard
from recipe_planner.services.validation import (
    non_negative,
    non_negative_int,
    parse_uuid_list,
)

if TYPE_CHECKING:
    from recipe_planner.services.ingredients import IngredientRepository
    from recipe_planner.services.recipes import RecipeRepository

_PROFILE_FIELDS = frozenset(
    {
        "name",
        "email",
        "password",
        "allergies",
        "diet",
        "excluded_ingredients",
        "gender",
        "weight",
        "height",
        "age",
        "activity_level",
    }
)
_UPDATABLE_FIELDS = _PROFILE_FIELDS | {"username", "role", "favorite_recipes"}

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for users and their reference lists."""

    async def create_user(self, payload: dict[str, object]) -> UserRecord:
        """Create a user and return it."""

    async def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id, if present."""

    async def get_by_username(self, username: str) -> UserRecord | None:
        """Return a user by username, if present."""

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Return a user by email, if present."""

    async def list_users(self) -> list[UserRecord]:
        """Return all users."""

    async def update_user(
        self, user_id: UUID, payload: dict[str, object]
    ) -> UserRecord:
        """Update a user and return it."""

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user."""

    async def find_admin(self, exclude_id: UUID) -> UserRecord | None:
        """Return any administrator other than ``exclude_id``."""

    async def list_users_with_favorite(self, recipe_id: UUID) -> list[UserRecord]:
        """Return users whose favourites include the recipe."""

    async def append_reference(
        self, user_id: UUID, list_name: str, item_id: UUID
    ) -> None:
        """Append an id to one of the user's reference lists."""

    async def remove_reference(
        self, user_id: UUID, list_name: str, item_id: UUID
    ) -> None:
        """Remove an id from one of the user's reference lists."""


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository
    ingredient_repository: "IngredientRepository"
    recipe_repository: "RecipeRepository"
    hasher: PasswordHasher
    token_service: TokenService
    guard: ReferenceGuard
    token_ttl: timedelta = timedelta(minutes=60)

    async def register(self, payload: dict[str, object]) -> UserRecord:
        """Create a regular user after checking the unique fields."""
        for required in ("username", "name", "email", "password"):
            if not payload.get(required):
                raise ValidationFailed(f"{required} is required", field=required)
        unknown = set(payload) - _PROFILE_FIELDS - {"username"}
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationFailed(f"{field} cannot be set on sign up", field=field)

        fields = await self._clean_fields(payload)
        await self._ensure_username_available(fields["username"])
        await self._ensure_email_available(fields["email"])
        user = await self.repository.create_user({**fields, "role": Role.REGULAR})
        _logger.info("Registered user %s", user.id)
        return user

    async def login(self, username: str, password: str) -> str:
        """Check the credentials and return a signed bearer token."""
        user = await self.repository.get_by_username(username.strip())
        if user is None or not self.hasher.verify(password, user.password_hash):
            raise Unauthenticated("Invalid username or password")
        expires_at = datetime.now(tz=UTC) + self.token_ttl
        return self.token_service.sign(
            {
                "sub": str(user.id),
                "username": user.username,
                "exp": int(expires_at.timestamp()),
            }
        )

    async def list_users(self, principal: Principal) -> list[UserRecord]:
        """Return every user; administrators only."""
        require_admin(principal)
        return await self.repository.list_users()

    async def get_user(self, principal: Principal, user_id: UUID) -> UserRecord:
        """Return a user visible to the principal."""
        authorize(principal, user_id)
        return await self._get(user_id)

    async def update_user(
        self, principal: Principal, user_id: UUID, payload: dict[str, object]
    ) -> UserRecord:
        """Apply a partial profile update."""
        authorize(principal, user_id)
        current = await self._get(user_id)
        unknown = set(payload) - _UPDATABLE_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationFailed(f"{field} cannot be updated", field=field)
        if "role" in payload and not principal.is_admin:
            raise Forbidden("Only an administrator can change roles")

        changes = await self._clean_fields(payload)
        if "role" in payload:
            changes["role"] = parse_enum(Role, payload["role"], "role")
        if changes.get("username", current.username) != current.username:
            await self._ensure_username_available(changes["username"])
        if changes.get("email", current.email) != current.email:
            await self._ensure_email_available(changes["email"])
        return await self.repository.update_user(user_id, changes)

    async def delete_user(self, principal: Principal, user_id: UUID) -> UserRecord:
        """Delete a user, handing their ingredients and recipes to an admin."""
        authorize(principal, user_id)
        user = await self._get(user_id)
        await self.guard.release_user(user)
        await self.repository.delete_user(user_id)
        _logger.info("Deleted user %s", user_id)
        return user

    async def _get(self, user_id: UUID) -> UserRecord:
        user = await self.repository.get_user(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    async def _ensure_username_available(self, username: str) -> None:
        if await self.repository.get_by_username(username) is not None:
            raise Conflict(f"Username '{username}' is already taken")

    async def _ensure_email_available(self, email: str) -> None:
        if await self.repository.get_by_email(email) is not None:
            raise Conflict(f"Email '{email}' is already registered")

    async def _clean_fields(  # noqa: PLR0912
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        fields: dict[str, object] = {}
        for text_field in ("username", "name"):
            if payload.get(text_field) is not None:
                value = str(payload[text_field]).strip()
                if not value:
                    raise ValidationFailed(
                        f"{text_field} must not be empty", field=text_field
                    )
                fields[text_field] = value
        if payload.get("email") is not None:
            fields["email"] = validate_email(str(payload["email"]))
        if payload.get("password") is not None:
            password = validate_password(str(payload["password"]))
            fields["password_hash"] = self.hasher.hash(password)
        if "allergies" in payload:
            fields["allergies"] = parse_enum_list(
                Allergen, payload["allergies"], "allergies"
            )
        if "diet" in payload:
            diet = payload["diet"]
            fields["diet"] = parse_enum(Diet, diet, "diet") if diet else None
        if "gender" in payload:
            gender = payload["gender"]
            fields["gender"] = parse_enum(Gender, gender, "gender") if gender else None
        if "activity_level" in payload:
            level = payload["activity_level"]
            fields["activity_level"] = (
                parse_enum(ActivityLevel, level, "activity_level") if level else None
            )
        for number_field in ("weight", "height"):
            if payload.get(number_field) is not None:
                fields[number_field] = non_negative(
                    payload[number_field], number_field
                )
        if payload.get("age") is not None:
            fields["age"] = non_negative_int(payload["age"], "age")
        if "excluded_ingredients" in payload:
            ids = parse_uuid_list(
                payload["excluded_ingredients"], "excluded_ingredients"
            )
            for ingredient_id in ids:
                ingredient = await self.ingredient_repository.get_ingredient(
                    ingredient_id
                )
                if ingredient is None:
                    raise NotFound(f"Ingredient {ingredient_id} not found")
            fields["excluded_ingredients"] = ids
        if "favorite_recipes" in payload:
            ids = parse_uuid_list(payload["favorite_recipes"], "favorite_recipes")
            for recipe_id in ids:
                if await self.recipe_repository.get_recipe(recipe_id) is None:
                    raise NotFound(f"Recipe {recipe_id} not found")
            fields["favorite_recipes"] = ids
        return fields
