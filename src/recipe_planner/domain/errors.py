"""Error taxonomy raised by the application services."""


class RecipePlannerError(Exception):
    """Base class for expected, caller-facing failures."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, object]:
        """Extra fields included in the error response body."""
        return {}


class NotFound(RecipePlannerError):
    kind = "not_found"


class ValidationFailed(RecipePlannerError):
    """A field value broke a domain invariant."""

    kind = "validation_failed"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def details(self) -> dict[str, object]:
        return {"field": self.field} if self.field else {}


class Unauthenticated(RecipePlannerError):
    kind = "unauthenticated"


class Forbidden(RecipePlannerError):
    kind = "forbidden"


class Conflict(RecipePlannerError):
    """The operation clashes with live references or a unique field."""

    kind = "conflict"

    def __init__(self, message: str, count: int | None = None) -> None:
        super().__init__(message)
        self.count = count

    def details(self) -> dict[str, object]:
        return {"count": self.count} if self.count is not None else {}


class Unavailable(RecipePlannerError):
    kind = "unavailable"


class NoRecipeAvailable(RecipePlannerError):
    """A meal-plan course has no candidate recipe after filtering."""

    kind = "no_recipe_available"

    def __init__(self, course: str) -> None:
        super().__init__(f"No recipe available for course: {course}")
        self.course = course

    def details(self) -> dict[str, object]:
        return {"course": self.course}
