"""Conversion between domain values and Supabase row payloads."""

from dataclasses import asdict, is_dataclass
from enum import Enum
from uuid import UUID


def to_row(payload: dict[str, object]) -> dict[str, object]:
    """Return a JSON-ready copy of a service payload."""
    return {key: _encode(value) for key, value in payload.items()}


def _encode(value: object) -> object:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return _encode(asdict(value))
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [_encode(item) for item in value]
    return value


def parse_uuid_list(raw: object) -> list[UUID]:
    """Parse a stored id array, tolerating NULL columns."""
    return [UUID(str(item)) for item in raw or []]


def optional_float(raw: object) -> float | None:
    return float(raw) if raw is not None else None
