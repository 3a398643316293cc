"""Rendering of domain records as camelCase JSON bodies."""

from uuid import UUID

from recipe_planner.domain.ingredients import IngredientRecord, Nutrient
from recipe_planner.domain.menus import DayPlan, MenuRecord
from recipe_planner.domain.nutrition import ConsumptionTargets, MacroTarget
from recipe_planner.domain.recipes import RecipeRecord
from recipe_planner.domain.users import UserRecord


def _ids(values: list[UUID]) -> list[str]:
    return [str(value) for value in values]


def _nutrients(nutrients: list[Nutrient]) -> list[dict[str, object]]:
    return [
        {"name": n.name.value, "amount": n.amount, "unit": n.unit} for n in nutrients
    ]


def present_ingredient(ingredient: IngredientRecord) -> dict[str, object]:
    return {
        "id": str(ingredient.id),
        "name": ingredient.name,
        "amount": ingredient.amount,
        "unit": ingredient.unit,
        "estimatedCost": ingredient.estimated_cost,
        "foodGroup": ingredient.food_group.value,
        "allergens": [allergen.value for allergen in ingredient.allergens],
        "nutrients": _nutrients(ingredient.nutrients),
        "ownerId": str(ingredient.owner_id),
    }


def present_recipe(recipe: RecipeRecord) -> dict[str, object]:
    return {
        "id": str(recipe.id),
        "name": recipe.name,
        "servings": recipe.servings,
        "preparationTime": recipe.preparation_time,
        "foodType": recipe.food_type.value,
        "instructions": list(recipe.instructions),
        "comments": recipe.comments,
        "cookware": list(recipe.cookware),
        "ingredients": [
            {"ingredientId": str(usage.ingredient_id), "amount": usage.amount}
            for usage in recipe.ingredients
        ],
        "estimatedCost": recipe.estimated_cost,
        "allergens": [allergen.value for allergen in recipe.allergens],
        "nutrients": _nutrients(recipe.nutrients),
        "ownerId": str(recipe.owner_id),
    }


def _day(day: DayPlan) -> dict[str, object]:
    return {
        "starterId": str(day.starter_id),
        "mainId": str(day.main_id),
        "dessertId": str(day.dessert_id),
        "bread": day.bread,
    }


def present_menu(menu: MenuRecord) -> dict[str, object]:
    return {
        "id": str(menu.id),
        "title": menu.title,
        "numberDays": menu.number_days,
        "numberServices": menu.number_services,
        "caloriesTarget": menu.calories_target,
        "averageEstimatedCost": menu.average_estimated_cost,
        "days": [_day(day) for day in menu.days],
        "allergies": [allergen.value for allergen in menu.allergies],
        "diet": menu.diet.value if menu.diet else None,
        "excludedIngredients": _ids(menu.excluded_ingredients),
        "ownerId": str(menu.owner_id),
    }


def present_user(user: UserRecord) -> dict[str, object]:
    """Render a user without the password hash."""
    biometrics = user.biometrics
    return {
        "id": str(user.id),
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "allergies": [allergen.value for allergen in user.dietary.allergies],
        "diet": user.dietary.diet.value if user.dietary.diet else None,
        "excludedIngredients": _ids(user.dietary.excluded_ingredients),
        "gender": biometrics.gender.value if biometrics.gender else None,
        "weight": biometrics.weight,
        "height": biometrics.height,
        "age": biometrics.age,
        "activityLevel": (
            biometrics.activity_level.value if biometrics.activity_level else None
        ),
        "createdIngredients": _ids(user.created_ingredients),
        "createdRecipes": _ids(user.created_recipes),
        "favoriteRecipes": _ids(user.favorite_recipes),
        "savedMenus": _ids(user.saved_menus),
    }


def _macro(target: MacroTarget) -> dict[str, float]:
    return {"amount": target.amount, "percentage": target.percentage}


def present_consumption(targets: ConsumptionTargets) -> dict[str, object]:
    macros = targets.macros
    return {
        "basalMetabolism": targets.basal_metabolism,
        "totalKcal": targets.total_kcal,
        "kcalPerMeal": targets.kcal_per_meal,
        "macros": {
            "proteinMin": _macro(macros.protein_min),
            "proteinMax": _macro(macros.protein_max),
            "carbohydrateMin": _macro(macros.carbohydrate_min),
            "carbohydrateMax": _macro(macros.carbohydrate_max),
            "fatMin": _macro(macros.fat_min),
            "fatMax": _macro(macros.fat_max),
        },
    }
