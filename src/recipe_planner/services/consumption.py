"""Daily energy and per-meal macronutrient targets."""

from recipe_planner.domain.enums import ActivityLevel, Gender, parse_enum
from recipe_planner.domain.errors import ValidationFailed
from recipe_planner.domain.nutrition import (
    ConsumptionTargets,
    MacroRanges,
    MacroTarget,
)
from recipe_planner.domain.users import BiometricProfile
from recipe_planner.services.validation import non_negative, non_negative_int

ACTIVITY_FACTORS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}
MEAL_SHARE = 0.3

_KCAL_PER_GRAM_PROTEIN = 4
_KCAL_PER_GRAM_CARBOHYDRATE = 4
_KCAL_PER_GRAM_FAT = 9


def basal_metabolism(gender: Gender, weight: float, height: float, age: float) -> float:
    """Mifflin-St Jeor resting energy expenditure in kcal/day.

    ``weight`` is in kilograms, ``height`` in centimetres and ``age`` in years.
    """
    base = 10 * weight + 6.25 * height - 5 * age
    return base + 5 if gender == Gender.MALE else base - 161


def calculate_consumption(
    gender: Gender,
    weight: float,
    height: float,
    age: float,
    activity_level: ActivityLevel,
) -> ConsumptionTargets:
    """Return the energy estimate and macro ranges for a single meal."""
    basal = basal_metabolism(gender, weight, height, age)
    total = basal * ACTIVITY_FACTORS[activity_level]
    per_meal = total * MEAL_SHARE

    def target(share: float, kcal_per_gram: int) -> MacroTarget:
        return MacroTarget(amount=per_meal * share / kcal_per_gram, percentage=share)

    return ConsumptionTargets(
        basal_metabolism=basal,
        total_kcal=total,
        kcal_per_meal=per_meal,
        macros=MacroRanges(
            protein_min=target(0.1, _KCAL_PER_GRAM_PROTEIN),
            protein_max=target(0.35, _KCAL_PER_GRAM_PROTEIN),
            carbohydrate_min=target(0.45, _KCAL_PER_GRAM_CARBOHYDRATE),
            carbohydrate_max=target(0.65, _KCAL_PER_GRAM_CARBOHYDRATE),
            fat_min=target(0.2, _KCAL_PER_GRAM_FAT),
            fat_max=target(0.35, _KCAL_PER_GRAM_FAT),
        ),
    )


def consumption_for(payload: dict[str, object]) -> ConsumptionTargets:
    """Validate raw biometric inputs and compute the consumption targets."""
    for required in ("gender", "weight", "height", "age", "activity_level"):
        if payload.get(required) is None:
            raise ValidationFailed(f"{required} is required", field=required)
    profile = BiometricProfile(
        gender=parse_enum(Gender, payload["gender"], "gender"),
        weight=non_negative(payload["weight"], "weight"),
        height=non_negative(payload["height"], "height"),
        age=non_negative_int(payload["age"], "age"),
        activity_level=parse_enum(
            ActivityLevel, payload["activity_level"], "activity_level"
        ),
    )
    return calculate_consumption(
        profile.gender,
        profile.weight,
        profile.height,
        profile.age,
        profile.activity_level,
    )
