"""Closed enumerations shared by the domain records.

Member values are the wire labels stored in the database and exchanged over
HTTP, so they must not be changed without a data migration.
"""

from enum import StrEnum
from typing import TypeVar

from recipe_planner.domain.errors import ValidationFailed

E = TypeVar("E", bound=StrEnum)


class Allergen(StrEnum):
    """The fourteen allergens that must be declared on food labels."""

    GLUTEN = "Cereales con gluten"
    CRUSTACEANS = "Crustáceos y productos a base de crustáceos"
    EGGS = "Huevos y productos derivados"
    FISH = "Pescado y productos a base de pescados"
    PEANUTS = "Cacahuetes, productos a base de cacahuetes y frutos secos"
    SOY = "Soja y productos a base de soja"
    MILK = "Leche y sus derivados (incluida la lactosa)"
    TREE_NUTS = "Frutos de cáscara y productos derivados"
    CELERY = "Apio y productos derivados"
    MUSTARD = "Mostaza y productos a base de mostaza"
    SESAME = "Granos o semillas de sésamo y productos a base de sésamo"
    SULPHITES = "Dióxido de azufre y sulfitos"
    LUPIN = "Altramuces y productos a base de altramuces"
    MOLLUSCS = "Moluscos y crustáceos y productos a base de estos"


class FoodGroup(StrEnum):
    DAIRY = "Lácteos y derivados"
    EGGS = "Huevos y derivados"
    MEAT = "Cárnicos y derivados"
    FISH = "Pescados, moluscos, reptiles, crustáceos y derivados"
    FATS = "Grasas y aceites"
    CEREALS = "Cereales y derivados"
    LEGUMES = "Legumbres, semillas, frutos secos y derivados"
    VEGETABLES = "Verduras, hortalizas y derivados"
    FRUITS = "Frutas y derivados"
    SUGARS = "Azúcar, chocolate y derivados"
    DRINKS = "Bebidas (no lácteas)"
    MISCELLANEOUS = "Miscelánea"
    OTHER = "Otro"


class FoodType(StrEnum):
    """Course a recipe is served as."""

    STARTER = "Entrante"
    MAIN = "Plato principal"
    DESSERT = "Postre"


class NutrientName(StrEnum):
    ENERGY = "Energía"
    PROTEIN = "Proteinas"
    CARBOHYDRATE = "Carbohidratos"
    TOTAL_FAT = "Grasa Total"
    CALCIUM = "Calcio"
    IRON = "Hierro"
    POTASSIUM = "Potasio"
    MAGNESIUM = "Magnesio"
    SODIUM = "Sodio"
    PHOSPHORUS = "Fósforo"
    IODINE = "Yodo"
    SELENIUM = "Selenio"
    ZINC = "Zinc"
    VITAMIN_A = "Vitamina A"
    VITAMIN_B6 = "Vitamina B6"
    VITAMIN_B12 = "Vitamina B12"
    VITAMIN_C = "Vitamina C"
    VITAMIN_D = "Vitamina D"
    VITAMIN_E = "Vitamina E"
    SALT = "Sal"
    SUGAR = "Azúcares"
    SATURATED_FAT = "Grasas Saturadas"
    FIBER = "Fibra"
    CHOLESTEROL = "Colesterol"


class Diet(StrEnum):
    DIABETIC = "No adecuado para diabeticos"
    VEGETARIAN = "No adecuado para vegetarianos"
    VEGAN = "No adecuado para veganos"


class Role(StrEnum):
    REGULAR = "Usuario regular"
    ADMIN = "Administrador"


class Gender(StrEnum):
    MALE = "Masculino"
    FEMALE = "Femenino"


class ActivityLevel(StrEnum):
    SEDENTARY = "Sedentario"
    LIGHT = "Ligero"
    MODERATE = "Moderado"
    ACTIVE = "Activo"
    VERY_ACTIVE = "Muy activo"


MANDATORY_NUTRIENTS: tuple[NutrientName, ...] = (
    NutrientName.ENERGY,
    NutrientName.PROTEIN,
    NutrientName.CARBOHYDRATE,
    NutrientName.TOTAL_FAT,
    NutrientName.SATURATED_FAT,
    NutrientName.SALT,
    NutrientName.SUGAR,
)

_NUTRIENT_UNITS: dict[NutrientName, str] = {
    NutrientName.ENERGY: "kcal",
    NutrientName.PROTEIN: "g",
    NutrientName.CARBOHYDRATE: "g",
    NutrientName.TOTAL_FAT: "g",
    NutrientName.SALT: "g",
    NutrientName.SUGAR: "g",
    NutrientName.SATURATED_FAT: "g",
    NutrientName.FIBER: "g",
    NutrientName.VITAMIN_A: "ug",
    NutrientName.VITAMIN_D: "ug",
    NutrientName.VITAMIN_B12: "ug",
    NutrientName.IODINE: "ug",
    NutrientName.SELENIUM: "ug",
    NutrientName.VITAMIN_B6: "mg",
    NutrientName.VITAMIN_C: "mg",
    NutrientName.VITAMIN_E: "mg",
    NutrientName.CALCIUM: "mg",
    NutrientName.IRON: "mg",
    NutrientName.POTASSIUM: "mg",
    NutrientName.MAGNESIUM: "mg",
    NutrientName.SODIUM: "mg",
    NutrientName.PHOSPHORUS: "mg",
    NutrientName.ZINC: "mg",
    NutrientName.CHOLESTEROL: "mg",
}


def unit_for(name: NutrientName) -> str:
    """Return the measurement unit a nutrient amount is expressed in."""
    return _NUTRIENT_UNITS.get(name, "")


def parse_enum(enum_cls: type[E], value: object, field: str) -> E:
    """Coerce a wire value into a closed enumeration member."""
    try:
        return enum_cls(value)
    except ValueError as exc:
        message = f"Unknown {field} value: {value!r}"
        raise ValidationFailed(message, field=field) from exc


def parse_enum_list(enum_cls: type[E], values: object, field: str) -> list[E]:
    """Coerce a list of wire values, dropping duplicates but keeping order."""
    if values is None:
        return []
    if not isinstance(values, list | tuple):
        raise ValidationFailed(f"{field} must be a list", field=field)
    parsed = [parse_enum(enum_cls, value, field) for value in values]
    return list(dict.fromkeys(parsed))
