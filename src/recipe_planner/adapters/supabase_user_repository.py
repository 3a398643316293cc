"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AsyncClient

from recipe_planner.adapters.supabase_rows import (
    optional_float,
    parse_uuid_list,
    to_row,
)
from recipe_planner.domain.enums import ActivityLevel, Allergen, Diet, Gender, Role
from recipe_planner.domain.users import BiometricProfile, DietaryProfile, UserRecord
from recipe_planner.services.users import UserRepository

_TABLE = "users"
_REFERENCE_LISTS = frozenset(
    {"created_ingredients", "created_recipes", "favorite_recipes", "saved_menus"}
)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: AsyncClient

    async def create_user(self, payload: dict[str, object]) -> UserRecord:
        """Insert a user row and return it."""
        response = await self.client.table(_TABLE).insert(to_row(payload)).execute()
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return parse_user(response.data[0])

    async def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id, if present."""
        return await self._first("id", str(user_id))

    async def get_by_username(self, username: str) -> UserRecord | None:
        """Return a user by username, if present."""
        return await self._first("username", username)

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Return a user by email, if present."""
        return await self._first("email", email)

    async def list_users(self) -> list[UserRecord]:
        """Return all users ordered by username."""
        response = (
            await self.client.table(_TABLE).select("*").order("username").execute()
        )
        return [parse_user(row) for row in response.data or []]

    async def update_user(
        self, user_id: UUID, payload: dict[str, object]
    ) -> UserRecord:
        """Update a user row and return it."""
        if not payload:
            current = await self.get_user(user_id)
            if current is None:
                raise RuntimeError("Failed to update user")
            return current
        response = (
            await self.client.table(_TABLE)
            .update(to_row(payload))
            .eq("id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update user")
        return parse_user(response.data[0])

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user row."""
        await self.client.table(_TABLE).delete().eq("id", str(user_id)).execute()

    async def find_admin(self, exclude_id: UUID) -> UserRecord | None:
        """Return any administrator other than ``exclude_id``."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .eq("role", Role.ADMIN.value)
            .neq("id", str(exclude_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_user(response.data[0])

    async def list_users_with_favorite(self, recipe_id: UUID) -> list[UserRecord]:
        """Return users whose favourites include the recipe."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .contains("favorite_recipes", [str(recipe_id)])
            .execute()
        )
        return [parse_user(row) for row in response.data or []]

    async def append_reference(
        self, user_id: UUID, list_name: str, item_id: UUID
    ) -> None:
        """Append an id to a reference list unless already present."""
        current = await self._read_list(user_id, list_name)
        if str(item_id) in current:
            return
        await self._write_list(user_id, list_name, [*current, str(item_id)])

    async def remove_reference(
        self, user_id: UUID, list_name: str, item_id: UUID
    ) -> None:
        """Remove an id from a reference list."""
        current = await self._read_list(user_id, list_name)
        if str(item_id) not in current:
            return
        remaining = [value for value in current if value != str(item_id)]
        await self._write_list(user_id, list_name, remaining)

    async def _first(self, column: str, value: str) -> UserRecord | None:
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_user(response.data[0])

    async def _read_list(self, user_id: UUID, list_name: str) -> list[str]:
        if list_name not in _REFERENCE_LISTS:
            raise ValueError(f"Unknown reference list: {list_name}")
        response = (
            await self.client.table(_TABLE)
            .select(list_name)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return []
        return [str(value) for value in response.data[0].get(list_name) or []]

    async def _write_list(
        self, user_id: UUID, list_name: str, values: list[str]
    ) -> None:
        await self.client.table(_TABLE).update({list_name: values}).eq(
            "id", str(user_id)
        ).execute()


def parse_user(row: dict[str, object]) -> UserRecord:
    """Parse a user row into a domain model."""
    diet = row.get("diet")
    gender = row.get("gender")
    activity_level = row.get("activity_level")
    age = row.get("age")
    return UserRecord(
        id=UUID(row["id"]),
        username=str(row.get("username", "")),
        name=str(row.get("name", "")),
        password_hash=str(row.get("password_hash", "")),
        email=str(row.get("email", "")),
        role=Role(row.get("role") or Role.REGULAR.value),
        dietary=DietaryProfile(
            allergies=[Allergen(value) for value in row.get("allergies") or []],
            diet=Diet(diet) if diet else None,
            excluded_ingredients=parse_uuid_list(row.get("excluded_ingredients")),
        ),
        biometrics=BiometricProfile(
            gender=Gender(gender) if gender else None,
            weight=optional_float(row.get("weight")),
            height=optional_float(row.get("height")),
            age=int(age) if age is not None else None,
            activity_level=ActivityLevel(activity_level) if activity_level else None,
        ),
        created_ingredients=parse_uuid_list(row.get("created_ingredients")),
        created_recipes=parse_uuid_list(row.get("created_recipes")),
        favorite_recipes=parse_uuid_list(row.get("favorite_recipes")),
        saved_menus=parse_uuid_list(row.get("saved_menus")),
    )
