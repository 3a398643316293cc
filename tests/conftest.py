"""Shared test fixtures."""

import random
from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

import pytest

from recipe_planner.adapters.jwt_token_service import PyJwtTokenService
from recipe_planner.config import Settings
from recipe_planner.containers import AppContainer, wire_services
from recipe_planner.domain.enums import (
    MANDATORY_NUTRIENTS,
    Allergen,
    FoodGroup,
    FoodType,
    NutrientName,
    Role,
)
from recipe_planner.domain.ingredients import IngredientRecord, Nutrient
from recipe_planner.domain.menus import MenuRecord
from recipe_planner.domain.recipes import IngredientUsage, RecipeRecord
from recipe_planner.domain.users import (
    BiometricProfile,
    DietaryProfile,
    Principal,
    UserRecord,
)
from recipe_planner.services.auth import PasswordHasher
from recipe_planner.services.ingredients import IngredientRepository
from recipe_planner.services.menus import MenuRepository
from recipe_planner.services.recipes import RecipeRepository
from recipe_planner.services.users import UserRepository

_DIETARY_FIELDS = {"allergies", "diet", "excluded_ingredients"}
_BIOMETRIC_FIELDS = {"gender", "weight", "height", "age", "activity_level"}


@dataclass
class InMemoryIngredientRepository(IngredientRepository):
    """In-memory ingredient repository for tests."""

    ingredients: dict[UUID, IngredientRecord] = field(default_factory=dict)
    updates: list[UUID] = field(default_factory=list)

    def add(self, ingredient: IngredientRecord) -> IngredientRecord:
        self.ingredients[ingredient.id] = ingredient
        return ingredient

    async def create_ingredient(self, payload: dict[str, object]) -> IngredientRecord:
        return self.add(IngredientRecord(id=uuid4(), **payload))

    async def get_ingredient(self, ingredient_id: UUID) -> IngredientRecord | None:
        return self.ingredients.get(ingredient_id)

    async def get_by_name(self, name: str) -> IngredientRecord | None:
        for ingredient in self.ingredients.values():
            if ingredient.name == name:
                return ingredient
        return None

    async def list_ingredients(self) -> list[IngredientRecord]:
        return list(self.ingredients.values())

    async def update_ingredient(
        self, ingredient_id: UUID, payload: dict[str, object]
    ) -> IngredientRecord:
        self.updates.append(ingredient_id)
        return self.add(replace(self.ingredients[ingredient_id], **payload))

    async def delete_ingredient(self, ingredient_id: UUID) -> None:
        self.ingredients.pop(ingredient_id, None)


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: dict[UUID, RecipeRecord] = field(default_factory=dict)
    updates: list[UUID] = field(default_factory=list)

    def add(self, recipe: RecipeRecord) -> RecipeRecord:
        self.recipes[recipe.id] = recipe
        return recipe

    async def create_recipe(self, payload: dict[str, object]) -> RecipeRecord:
        return self.add(RecipeRecord(id=uuid4(), **payload))

    async def get_recipe(self, recipe_id: UUID) -> RecipeRecord | None:
        return self.recipes.get(recipe_id)

    async def list_recipes(self, name: str | None = None) -> list[RecipeRecord]:
        return [
            recipe
            for recipe in self.recipes.values()
            if name is None or recipe.name == name
        ]

    async def update_recipe(
        self, recipe_id: UUID, payload: dict[str, object]
    ) -> RecipeRecord:
        self.updates.append(recipe_id)
        return self.add(replace(self.recipes[recipe_id], **payload))

    async def delete_recipe(self, recipe_id: UUID) -> None:
        self.recipes.pop(recipe_id, None)

    async def list_recipes_using_ingredient(
        self, ingredient_id: UUID
    ) -> list[RecipeRecord]:
        return [
            recipe
            for recipe in self.recipes.values()
            if ingredient_id in recipe.ingredient_ids()
        ]

    async def list_recipes_using_any(
        self, ingredient_ids: list[UUID]
    ) -> list[RecipeRecord]:
        wanted = set(ingredient_ids)
        return [
            recipe
            for recipe in self.recipes.values()
            if wanted.intersection(recipe.ingredient_ids())
        ]


@dataclass
class InMemoryMenuRepository(MenuRepository):
    """In-memory menu repository for tests."""

    menus: dict[UUID, MenuRecord] = field(default_factory=dict)

    def add(self, menu: MenuRecord) -> MenuRecord:
        self.menus[menu.id] = menu
        return menu

    async def create_menu(self, payload: dict[str, object]) -> MenuRecord:
        return self.add(MenuRecord(id=uuid4(), **payload))

    async def get_menu(self, menu_id: UUID) -> MenuRecord | None:
        return self.menus.get(menu_id)

    async def list_menus(self) -> list[MenuRecord]:
        return list(self.menus.values())

    async def update_menu(
        self, menu_id: UUID, payload: dict[str, object]
    ) -> MenuRecord:
        return self.add(replace(self.menus[menu_id], **payload))

    async def delete_menu(self, menu_id: UUID) -> None:
        self.menus.pop(menu_id, None)

    async def list_menus_using_recipe(self, recipe_id: UUID) -> list[MenuRecord]:
        return [menu for menu in self.menus.values() if recipe_id in menu.recipe_ids()]


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)

    def add(self, user: UserRecord) -> UserRecord:
        self.users[user.id] = user
        return user

    async def create_user(self, payload: dict[str, object]) -> UserRecord:
        fields = dict(payload)
        user = UserRecord(
            id=uuid4(),
            username=fields.pop("username"),
            name=fields.pop("name"),
            password_hash=fields.pop("password_hash"),
            email=fields.pop("email"),
            role=fields.pop("role", Role.REGULAR),
        )
        return self.add(_apply_user_payload(user, fields))

    async def get_user(self, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    async def get_by_username(self, username: str) -> UserRecord | None:
        return next(
            (user for user in self.users.values() if user.username == username), None
        )

    async def get_by_email(self, email: str) -> UserRecord | None:
        return next((user for user in self.users.values() if user.email == email), None)

    async def list_users(self) -> list[UserRecord]:
        return list(self.users.values())

    async def update_user(
        self, user_id: UUID, payload: dict[str, object]
    ) -> UserRecord:
        return self.add(_apply_user_payload(self.users[user_id], payload))

    async def delete_user(self, user_id: UUID) -> None:
        self.users.pop(user_id, None)

    async def find_admin(self, exclude_id: UUID) -> UserRecord | None:
        return next(
            (
                user
                for user in self.users.values()
                if user.is_admin and user.id != exclude_id
            ),
            None,
        )

    async def list_users_with_favorite(self, recipe_id: UUID) -> list[UserRecord]:
        return [
            user for user in self.users.values() if recipe_id in user.favorite_recipes
        ]

    async def append_reference(
        self, user_id: UUID, list_name: str, item_id: UUID
    ) -> None:
        user = self.users.get(user_id)
        if user is None:
            return
        current = getattr(user, list_name)
        if item_id not in current:
            self.add(replace(user, **{list_name: [*current, item_id]}))

    async def remove_reference(
        self, user_id: UUID, list_name: str, item_id: UUID
    ) -> None:
        user = self.users.get(user_id)
        if user is None:
            return
        remaining = [value for value in getattr(user, list_name) if value != item_id]
        self.add(replace(user, **{list_name: remaining}))


def _apply_user_payload(user: UserRecord, payload: dict[str, object]) -> UserRecord:
    dietary = {k: v for k, v in payload.items() if k in _DIETARY_FIELDS}
    biometrics = {k: v for k, v in payload.items() if k in _BIOMETRIC_FIELDS}
    rest = {
        k: v
        for k, v in payload.items()
        if k not in _DIETARY_FIELDS and k not in _BIOMETRIC_FIELDS
    }
    return replace(
        user,
        dietary=replace(user.dietary, **dietary),
        biometrics=replace(user.biometrics, **biometrics),
        **rest,
    )


class FakePasswordHasher(PasswordHasher):
    """Reversible stand-in for bcrypt so tests stay fast."""

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed:{password}"


def mandatory_nutrients(amount: float = 1.0, **overrides: float) -> list[Nutrient]:
    """Return every mandatory nutrient, with per-name overrides by member name."""
    nutrients = [Nutrient(name=name, amount=amount) for name in MANDATORY_NUTRIENTS]
    values = {nutrient.name: nutrient.amount for nutrient in nutrients}
    for member, value in overrides.items():
        values[NutrientName[member]] = value
    return [Nutrient(name=name, amount=value) for name, value in values.items()]


def make_ingredient(
    name: str = "tomate",
    *,
    owner_id: UUID | None = None,
    amount: float = 100.0,
    estimated_cost: float = 1.0,
    allergens: list[Allergen] | None = None,
    nutrients: list[Nutrient] | None = None,
    food_group: FoodGroup = FoodGroup.VEGETABLES,
) -> IngredientRecord:
    return IngredientRecord(
        id=uuid4(),
        name=name,
        amount=amount,
        unit="gr",
        estimated_cost=estimated_cost,
        food_group=food_group,
        owner_id=owner_id or uuid4(),
        allergens=list(allergens or []),
        nutrients=nutrients if nutrients is not None else mandatory_nutrients(),
    )


def make_recipe(
    name: str = "ensalada",
    *,
    food_type: FoodType = FoodType.STARTER,
    owner_id: UUID | None = None,
    usages: list[tuple[IngredientRecord, float]] | None = None,
    servings: int = 2,
    estimated_cost: float = 0.0,
    allergens: list[Allergen] | None = None,
) -> RecipeRecord:
    return RecipeRecord(
        id=uuid4(),
        name=name,
        servings=servings,
        preparation_time=10,
        food_type=food_type,
        owner_id=owner_id or uuid4(),
        instructions=["Mezclar"],
        ingredients=[
            IngredientUsage(ingredient_id=ingredient.id, amount=used)
            for ingredient, used in usages or []
        ],
        estimated_cost=estimated_cost,
        allergens=list(allergens or []),
    )


def make_user(
    username: str = "ana",
    *,
    role: Role = Role.REGULAR,
    dietary: DietaryProfile | None = None,
) -> UserRecord:
    return UserRecord(
        id=uuid4(),
        username=username,
        name=username.title(),
        password_hash="hashed:Secret1",
        email=f"{username}@example.com",
        role=role,
        dietary=dietary or DietaryProfile(),
        biometrics=BiometricProfile(),
    )


def principal_for(user: UserRecord) -> Principal:
    return Principal(id=user.id, username=user.username, role=user.role)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        jwt_secret="test-secret-with-enough-bytes-for-hs256",
    )


@pytest.fixture
def ingredient_repository() -> InMemoryIngredientRepository:
    return InMemoryIngredientRepository()


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def menu_repository() -> InMemoryMenuRepository:
    return InMemoryMenuRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def token_service(settings: Settings) -> PyJwtTokenService:
    return PyJwtTokenService(secret=settings.jwt_secret)


@pytest.fixture
def admin(user_repository: InMemoryUserRepository) -> UserRecord:
    return user_repository.add(make_user("admin", role=Role.ADMIN))


@pytest.fixture
def owner(user_repository: InMemoryUserRepository) -> UserRecord:
    return user_repository.add(make_user("ana"))


@pytest.fixture
def container(
    settings: Settings,
    ingredient_repository: InMemoryIngredientRepository,
    recipe_repository: InMemoryRecipeRepository,
    menu_repository: InMemoryMenuRepository,
    user_repository: InMemoryUserRepository,
    token_service: PyJwtTokenService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return wire_services(
        settings=settings,
        ingredient_repository=ingredient_repository,
        recipe_repository=recipe_repository,
        menu_repository=menu_repository,
        user_repository=user_repository,
        token_service=token_service,
        hasher=FakePasswordHasher(),
        rng=random.Random(7),
        close_resources=close_resources,
    )
