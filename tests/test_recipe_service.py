"""Tests for recipe service."""

import asyncio
from dataclasses import replace
from uuid import uuid4

import pytest

from recipe_planner.domain.enums import Allergen, FoodType
from recipe_planner.domain.errors import Conflict, NotFound, ValidationFailed
from recipe_planner.domain.menus import DayPlan, MenuRecord
from tests.conftest import make_ingredient, make_recipe, make_user, principal_for


def _payload(*usages: tuple[object, float], **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "name": "Tortilla",
        "servings": 4,
        "preparation_time": 30,
        "food_type": FoodType.MAIN.value,
        "instructions": ["Batir los huevos", "Cuajar"],
        "cookware": ["Sartén"],
        "ingredients": [
            {"ingredient_id": str(ingredient.id), "amount": amount}
            for ingredient, amount in usages
        ],
    }
    payload.update(overrides)
    return payload


def test_create_recipe_derives_cost_and_allergens(
    container, owner, ingredient_repository, user_repository
) -> None:
    eggs = ingredient_repository.add(
        make_ingredient("huevo", estimated_cost=3.0, allergens=[Allergen.EGGS])
    )
    potato = ingredient_repository.add(make_ingredient("patata", estimated_cost=1.2))

    recipe = asyncio.run(
        container.recipe_service.create_recipe(
            principal_for(owner), _payload((eggs, 300), (potato, 500))
        )
    )

    assert recipe.estimated_cost == pytest.approx(9.0 + 6.0)
    assert recipe.allergens == [Allergen.EGGS]
    assert recipe.owner_id == owner.id
    assert user_repository.users[owner.id].created_recipes == [recipe.id]


def test_create_recipe_rejects_derived_fields(
    container, owner, ingredient_repository
) -> None:
    eggs = ingredient_repository.add(make_ingredient("huevo"))

    with pytest.raises(ValidationFailed) as excinfo:
        asyncio.run(
            container.recipe_service.create_recipe(
                principal_for(owner), _payload((eggs, 100), estimated_cost=1)
            )
        )

    assert excinfo.value.field == "estimated_cost"


def test_create_recipe_requires_ingredients(container, owner) -> None:
    with pytest.raises(ValidationFailed) as excinfo:
        asyncio.run(
            container.recipe_service.create_recipe(principal_for(owner), _payload())
        )

    assert excinfo.value.field == "ingredients"


def test_create_recipe_with_unknown_ingredient_fails(container, owner) -> None:
    with pytest.raises(NotFound):
        asyncio.run(
            container.recipe_service.create_recipe(
                principal_for(owner), _payload((make_ingredient(), 10))
            )
        )


@pytest.mark.parametrize("servings", [0, -2, 1.5])
def test_create_recipe_rejects_bad_servings(
    container, owner, ingredient_repository, servings
) -> None:
    eggs = ingredient_repository.add(make_ingredient("huevo"))

    with pytest.raises(ValidationFailed):
        asyncio.run(
            container.recipe_service.create_recipe(
                principal_for(owner), _payload((eggs, 100), servings=servings)
            )
        )


def test_update_recipe_rebuilds_on_new_ingredient_list(
    container, owner, ingredient_repository
) -> None:
    rice = ingredient_repository.add(make_ingredient("arroz", estimated_cost=1.0))
    prawns = ingredient_repository.add(
        make_ingredient("gamba", estimated_cost=20.0, allergens=[Allergen.CRUSTACEANS])
    )
    principal = principal_for(owner)
    recipe = asyncio.run(
        container.recipe_service.create_recipe(principal, _payload((rice, 200)))
    )

    updated = asyncio.run(
        container.recipe_service.update_recipe(
            principal,
            recipe.id,
            {
                "ingredients": [
                    {"ingredient_id": rice.id, "amount": 200},
                    {"ingredient_id": prawns.id, "amount": 100},
                ]
            },
        )
    )

    assert updated.estimated_cost == pytest.approx(22.0)
    assert updated.allergens == [Allergen.CRUSTACEANS]


def test_list_recipes_filters_by_name(container, recipe_repository) -> None:
    recipe_repository.add(make_recipe("gazpacho"))
    recipe_repository.add(make_recipe("paella"))

    recipes = asyncio.run(container.recipe_service.list_recipes("paella"))

    assert [recipe.name for recipe in recipes] == ["paella"]


def test_delete_recipe_used_by_menu_reports_count(
    container, owner, recipe_repository, menu_repository
) -> None:
    recipe = recipe_repository.add(make_recipe(owner_id=owner.id))
    day = DayPlan(starter_id=recipe.id, main_id=recipe.id, dessert_id=recipe.id)
    for title in ("lunes", "martes"):
        menu_repository.add(
            MenuRecord(
                id=uuid4(),
                title=title,
                number_days=1,
                number_services=1,
                calories_target=0,
                average_estimated_cost=0,
                owner_id=owner.id,
                days=[day],
            )
        )

    with pytest.raises(Conflict) as excinfo:
        asyncio.run(
            container.recipe_service.delete_recipe(principal_for(owner), recipe.id)
        )

    assert excinfo.value.count == 2
    assert recipe.id in recipe_repository.recipes


def test_delete_recipe_removes_it_from_favourites(
    container, owner, user_repository, recipe_repository
) -> None:
    recipe = recipe_repository.add(make_recipe(owner_id=owner.id))
    user_repository.add(replace(owner, created_recipes=[recipe.id]))
    fan = user_repository.add(
        replace(make_user("luis"), favorite_recipes=[recipe.id])
    )

    asyncio.run(container.recipe_service.delete_recipe(principal_for(owner), recipe.id))

    assert recipe.id not in recipe_repository.recipes
    assert user_repository.users[fan.id].favorite_recipes == []
    assert user_repository.users[owner.id].created_recipes == []


def test_search_ranks_full_matches_first(container, recipe_repository) -> None:
    tomato = make_ingredient("tomate")
    bread = make_ingredient("pan")
    garlic = make_ingredient("ajo")
    partial = recipe_repository.add(make_recipe("tostada", usages=[(bread, 50)]))
    full = recipe_repository.add(
        make_recipe("pan con tomate", usages=[(bread, 50), (tomato, 30)])
    )
    recipe_repository.add(make_recipe("sopa de ajo", usages=[(garlic, 20)]))

    results = asyncio.run(
        container.recipe_service.search_by_ingredients([tomato.id, bread.id])
    )

    assert [recipe.id for recipe in results] == [full.id, partial.id]


def test_search_returns_at_most_five(container, recipe_repository) -> None:
    egg = make_ingredient("huevo")
    for index in range(7):
        recipe_repository.add(make_recipe(f"receta {index}", usages=[(egg, 60)]))

    results = asyncio.run(container.recipe_service.search_by_ingredients([egg.id]))

    assert len(results) == 5


def test_search_without_ingredients_is_empty(container, recipe_repository) -> None:
    recipe_repository.add(make_recipe())

    assert asyncio.run(container.recipe_service.search_by_ingredients([])) == []
