"""Tests for the REST endpoints."""

import time
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from recipe_planner.api.app import create_app, status_for
from recipe_planner.domain.enums import (
    MANDATORY_NUTRIENTS,
    Allergen,
    FoodGroup,
    FoodType,
)
from recipe_planner.domain.errors import Conflict, NoRecipeAvailable, Unavailable
from tests.conftest import make_ingredient, make_recipe


@pytest.fixture
def client(container) -> TestClient:
    return TestClient(create_app(container))


def _auth(token_service, user) -> dict[str, str]:
    token = token_service.sign({"sub": str(user.id), "exp": int(time.time()) + 60})
    return {"Authorization": f"Bearer {token}"}


def _ingredient_body(**overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "name": "Tomate",
        "estimatedCost": 2.5,
        "foodGroup": FoodGroup.VEGETABLES.value,
        "nutrients": [
            {"name": name.value, "amount": 1.0} for name in MANDATORY_NUTRIENTS
        ],
    }
    body.update(overrides)
    return body


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ingredient_cost_change_reaches_recipe(client, owner, token_service) -> None:
    headers = _auth(token_service, owner)

    missing_name = _ingredient_body()
    del missing_name["name"]
    assert (
        client.post("/ingredient", json=missing_name, headers=headers).status_code
        == 422
    )

    created = client.post("/ingredient", json=_ingredient_body(), headers=headers)
    assert created.status_code == 201
    ingredient = created.json()
    assert ingredient["name"] == "tomate"
    assert ingredient["ownerId"] == str(owner.id)

    recipe = client.post(
        "/recipe",
        json={
            "name": "Salmorejo",
            "servings": 2,
            "preparationTime": 15,
            "foodType": FoodType.STARTER.value,
            "instructions": ["Triturar"],
            "ingredients": [{"ingredientId": ingredient["id"], "amount": 200}],
        },
        headers=headers,
    ).json()
    assert recipe["estimatedCost"] == pytest.approx(5.0)

    patched = client.patch(
        f"/ingredient/{ingredient['id']}",
        json={"estimatedCost": 3.0},
        headers=headers,
    )
    assert patched.status_code == 200

    refreshed = client.get(f"/recipe/{recipe['id']}").json()
    assert refreshed["estimatedCost"] == pytest.approx(6.0)


def test_write_without_token_is_unauthenticated(client) -> None:
    response = client.post("/ingredient", json=_ingredient_body())

    assert response.status_code == 401
    assert response.json()["error"] == "unauthenticated"


def test_unknown_field_is_rejected(client, owner, token_service) -> None:
    response = client.post(
        "/ingredient",
        json=_ingredient_body(ownerId="someone"),
        headers=_auth(token_service, owner),
    )

    assert response.status_code == 422


def test_missing_ingredient_is_not_found(client, ingredient_repository) -> None:
    ingredient_repository.add(make_ingredient())

    response = client.get(f"/ingredient/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_list_ingredients_is_wrapped(client, ingredient_repository) -> None:
    stored = ingredient_repository.add(make_ingredient("sal"))

    response = client.get("/ingredient")

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["ingredients"]] == [str(stored.id)]


def test_delete_referenced_ingredient_reports_count(
    client, owner, token_service, ingredient_repository, recipe_repository
) -> None:
    ingredient = ingredient_repository.add(make_ingredient(owner_id=owner.id))
    recipe_repository.add(make_recipe(usages=[(ingredient, 50)]))

    response = client.delete(
        f"/ingredient/{ingredient.id}", headers=_auth(token_service, owner)
    )

    assert response.status_code == 409
    assert response.json() == {
        "error": "conflict",
        "detail": "Ingredient is used by 1 recipe(s)",
        "count": 1,
    }


def test_stranger_cannot_patch_recipe(
    client, owner, admin, token_service, recipe_repository
) -> None:
    recipe = recipe_repository.add(make_recipe(owner_id=admin.id))

    response = client.patch(
        f"/recipe/{recipe.id}",
        json={"name": "Mía"},
        headers=_auth(token_service, owner),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_register_login_and_read_profile(client) -> None:
    registered = client.post(
        "/user",
        json={
            "username": "lucia",
            "name": "Lucía",
            "email": "lucia@example.com",
            "password": "Secret1",
            "allergies": [Allergen.SESAME.value],
        },
    )
    assert registered.status_code == 201
    user = registered.json()
    assert "passwordHash" not in user
    assert user["allergies"] == [Allergen.SESAME.value]

    login = client.post("/login", json={"username": "lucia", "password": "Secret1"})
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['token']}"}

    profile = client.get(f"/user/{user['id']}", headers=headers)
    assert profile.status_code == 200
    assert profile.json()["username"] == "lucia"


def test_login_with_wrong_password(client, owner) -> None:
    response = client.post("/login", json={"username": "ana", "password": "Nope12"})

    assert response.status_code == 401


def test_list_users_requires_admin(client, owner, admin, token_service) -> None:
    assert client.get("/user", headers=_auth(token_service, owner)).status_code == 403

    response = client.get("/user", headers=_auth(token_service, admin))
    assert response.status_code == 200
    assert len(response.json()["users"]) == 2


def test_planner_without_candidates_conflicts(client, owner, token_service) -> None:
    response = client.post(
        "/planner",
        json={"numberDays": 2, "numberServices": 1},
        headers=_auth(token_service, owner),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "no_recipe_available"
    assert response.json()["course"] == FoodType.STARTER.value


def test_planner_saves_menu(
    client, owner, token_service, recipe_repository, user_repository
) -> None:
    for course in FoodType:
        recipe_repository.add(make_recipe(course.name, food_type=course))

    response = client.post(
        "/planner",
        json={"numberDays": 2, "numberServices": 3},
        headers=_auth(token_service, owner),
    )

    assert response.status_code == 201
    menu = response.json()
    assert len(menu["days"]) == 2
    saved = user_repository.users[owner.id].saved_menus
    assert [str(menu_id) for menu_id in saved] == [menu["id"]]


def test_recipe_search_endpoint(client, recipe_repository) -> None:
    rice = make_ingredient("arroz")
    recipe = recipe_repository.add(make_recipe("paella", usages=[(rice, 100)]))

    response = client.post(
        "/recipeSearchPerIngredients", json={"ingredients": [str(rice.id)]}
    )

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["recipes"]] == [str(recipe.id)]


def test_consumption_endpoint(client) -> None:
    response = client.post(
        "/calcNutrientsUser",
        json={
            "gender": "Masculino",
            "weight": 70,
            "height": 175,
            "age": 30,
            "activityLevel": "Sedentario",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["basalMetabolism"] == pytest.approx(1648.75)
    assert body["macros"]["proteinMin"]["percentage"] == 0.1


def test_unexpected_error_is_hidden(container, monkeypatch) -> None:
    async def boom() -> list:
        raise RuntimeError("database exploded")

    monkeypatch.setattr(container.menu_service, "list_menus", boom)
    client = TestClient(create_app(container), raise_server_exceptions=False)

    response = client.get("/menu")

    assert response.status_code == 500
    assert response.json() == {
        "error": "internal_error",
        "detail": "Internal server error",
    }


def test_status_for_error_kinds() -> None:
    assert status_for(Conflict("taken")) == 409
    assert status_for(NoRecipeAvailable("Postre")) == 409
    assert status_for(Unavailable("no admin")) == 503
