"""Validation errors raised by the nutrition store."""

from typing import Any

from pydantic import ValidationError


class NutritionError(ValueError):
    """Base class for rejected store mutations.

    Attributes:
        message: human-readable message
        details: field errors, one dict per offending field
    """

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []

    @classmethod
    def from_validation_error(cls, message: str, exc: ValidationError) -> "NutritionError":
        """Build an error whose details list each failing field."""
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return cls(message, details)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class InvalidGoal(NutritionError):
    """A goal field is negative or missing."""


class InvalidMeal(NutritionError):
    """A meal has an empty name, a negative value, or a duplicate id."""
