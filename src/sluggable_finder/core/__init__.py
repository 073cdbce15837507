"""Core configuration and utilities for sluggable_finder."""

from sluggable_finder.core.conditions import QueryConditions
from sluggable_finder.core.config import (
    DEFAULT_SEPARATOR,
    DEFAULT_TARGET_FIELD,
    FieldSource,
    MethodSource,
    SluggableConfig,
    StoreSettings,
    load_settings,
)
from sluggable_finder.core.errors import (
    ConfigurationError,
    EmptySourceValue,
    NotFound,
    NotSluggableError,
    SlugConflictError,
    SluggableError,
    StoreUnavailable,
    UniquenessRaceLost,
    UnknownFieldError,
    UnknownSourceError,
)
from sluggable_finder.core.log import configure_logging
from sluggable_finder.core.slug import SlugGenerator

__all__ = [
    "DEFAULT_SEPARATOR",
    "DEFAULT_TARGET_FIELD",
    "FieldSource",
    "MethodSource",
    "QueryConditions",
    "SlugGenerator",
    "SluggableConfig",
    "StoreSettings",
    "configure_logging",
    "load_settings",
    "ConfigurationError",
    "EmptySourceValue",
    "NotFound",
    "NotSluggableError",
    "SlugConflictError",
    "SluggableError",
    "StoreUnavailable",
    "UniquenessRaceLost",
    "UnknownFieldError",
    "UnknownSourceError",
]
