"""Coercion helpers for payload values reaching the services."""

from uuid import UUID

from recipe_planner.domain.errors import ValidationFailed


def non_negative(value: object, field: str) -> float:
    """Return the value as a float, rejecting non-numbers and negatives."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationFailed(f"{field} must be a number", field=field)
    if value < 0:
        raise ValidationFailed(f"{field} cannot be negative", field=field)
    return float(value)


def positive(value: object, field: str) -> float:
    """Return the value as a float, rejecting zero as well."""
    number = non_negative(value, field)
    if number == 0:
        raise ValidationFailed(f"{field} must be greater than zero", field=field)
    return number


def positive_int(value: object, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationFailed(f"{field} must be an integer", field=field)
    if value <= 0:
        raise ValidationFailed(f"{field} must be greater than zero", field=field)
    return value


def non_negative_int(value: object, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationFailed(f"{field} must be an integer", field=field)
    if value < 0:
        raise ValidationFailed(f"{field} cannot be negative", field=field)
    return value


def parse_uuid(value: object, field: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise ValidationFailed(f"{field} must be a valid id", field=field) from exc


def parse_uuid_list(values: object, field: str) -> list[UUID]:
    """Coerce a list of ids, dropping duplicates but keeping order."""
    if values is None:
        return []
    if not isinstance(values, list | tuple):
        raise ValidationFailed(f"{field} must be a list", field=field)
    return list(dict.fromkeys(parse_uuid(value, field) for value in values))
