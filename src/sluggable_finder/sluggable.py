"""Model registration for slug generation and slug-aware lookups."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from sluggable_finder.core.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_SEPARATOR,
    DEFAULT_TARGET_FIELD,
    FieldSource,
    MethodSource,
    SluggableConfig,
)
from sluggable_finder.core.errors import NotSluggableError, UnknownFieldError, UnknownSourceError

ModelT = TypeVar("ModelT", bound=type)

_CONFIG_ATTR = "__sluggable__"


def _has_field(model: type, name: str) -> bool:
    fields = getattr(model, "model_fields", None) or {}
    return name in fields


def _resolve_source(model: type, name: str) -> FieldSource | MethodSource:
    """Decide once whether the source is read or called."""
    if _has_field(model, name) or isinstance(getattr(model, name, None), property):
        return FieldSource(name=name)
    if callable(getattr(model, name, None)):
        return MethodSource(name=name)
    raise UnknownSourceError(model.__name__, name)


def sluggable_finder(
    source: str,
    *,
    to: str = DEFAULT_TARGET_FIELD,
    scope: str | None = None,
    separator: str = DEFAULT_SEPARATOR,
    identifier: str = "id",
    max_length: int | None = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> Callable[[ModelT], ModelT]:
    """Register a model class for slug generation.

    Args:
        source: Field, property or zero-argument method providing the slug text.
        to: Field the slug is written to.
        scope: Field whose value partitions slug uniqueness.
        separator: Separator between words and before numeric suffixes.
        identifier: Primary key attribute.
        max_length: Optional cap on the generated token length.
        max_retries: Save attempts when concurrent writers race for a slug.

    Returns:
        Class decorator attaching an immutable SluggableConfig to the model.

    Raises:
        ConfigurationError: If source, target or scope name nothing on the model.
    """

    def decorate(model: ModelT) -> ModelT:
        resolved = _resolve_source(model, source)
        for option, field in (("to", to), ("scope", scope), ("identifier", identifier)):
            if field is not None and not _has_field(model, field):
                raise UnknownFieldError(model.__name__, option, field)
        config = SluggableConfig(
            source=resolved,
            target_field=to,
            scope_field=scope,
            separator=separator,
            identifier_field=identifier,
            max_length=max_length,
            max_retries=max_retries,
        )
        setattr(model, _CONFIG_ATTR, config)
        return model

    return decorate


def find_config(model: type) -> SluggableConfig | None:
    """Slug configuration of a model, or None when it has none."""
    return getattr(model, _CONFIG_ATTR, None)


def sluggable_config(model: type) -> SluggableConfig:
    """Slug configuration of a registered model."""
    config = find_config(model)
    if config is None:
        raise NotSluggableError(model.__name__)
    return config


class SluggableMixin:
    """Adds the canonical external representation to registered models."""

    def to_param(self) -> str | None:
        """Slug when present, else the identifier as a string."""
        config = sluggable_config(type(self))
        slug: Any = getattr(self, config.target_field, None)
        if slug:
            return str(slug)
        identifier = config.identifier(self)
        return None if identifier is None else str(identifier)
