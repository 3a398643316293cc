"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroTarget:
    """Grams of a macronutrient and the share of meal energy they supply."""

    amount: float
    percentage: float


@dataclass(frozen=True)
class MacroRanges:
    """Lower and upper macronutrient targets for a single meal."""

    protein_min: MacroTarget
    protein_max: MacroTarget
    carbohydrate_min: MacroTarget
    carbohydrate_max: MacroTarget
    fat_min: MacroTarget
    fat_max: MacroTarget


@dataclass(frozen=True)
class ConsumptionTargets:
    """Daily energy estimate and per-meal macro targets for a person."""

    basal_metabolism: float
    total_kcal: float
    kcal_per_meal: float
    macros: MacroRanges
