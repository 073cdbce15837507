"""Exceptions raised by slug registration, assignment and lookup."""

from __future__ import annotations

from typing import Any


class SluggableError(Exception):
    """Base class for every error raised by sluggable_finder."""


class ConfigurationError(SluggableError):
    """Base exception for configuration errors with optional suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[Configuration Error] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class UnknownSourceError(ConfigurationError):
    """Error when the slug source names nothing readable on the model."""

    def __init__(self, model_name: str, source: str) -> None:
        super().__init__(
            f"{model_name} has no field, property or method named '{source}'",
            "Pass the name of a column or of a zero-argument method as the slug source.",
        )


class UnknownFieldError(ConfigurationError):
    """Error when a target or scope option names a missing field."""

    def __init__(self, model_name: str, option: str, field: str) -> None:
        super().__init__(
            f"Option '{option}' of {model_name} refers to unknown field '{field}'",
            f"Declare '{field}' on the model or point '{option}' at an existing field.",
        )


class NotSluggableError(ConfigurationError):
    """Error when a model was never registered with sluggable_finder."""

    def __init__(self, model_name: str) -> None:
        super().__init__(
            f"{model_name} is not registered for slugs",
            "Decorate the model class with @sluggable_finder(...).",
        )


class EmptySourceValue(SluggableError):
    """The normalized source value is empty, so no slug can be resolved."""


class StoreUnavailable(SluggableError):
    """The record store failed while reading or writing."""


class SlugConflictError(SluggableError):
    """A concurrent writer took the slug between the collision check and the write."""

    def __init__(self, slug: str | None) -> None:
        self.slug = slug
        super().__init__(f"Slug '{slug}' was taken by a concurrent save")


class UniquenessRaceLost(SluggableError):
    """Slug conflicts persisted through every retry attempt."""

    def __init__(self, candidate: str | None, attempts: int) -> None:
        self.candidate = candidate
        self.attempts = attempts
        super().__init__(f"Could not claim a unique slug for '{candidate}' after {attempts} attempts")


class NotFound(SluggableError, LookupError):
    """No record matched an identifier or slug lookup."""

    def __init__(self, model: type, param: Any) -> None:
        self.model = model
        self.param = param
        super().__init__(f"Couldn't find {model.__name__} with param {param!r}")
