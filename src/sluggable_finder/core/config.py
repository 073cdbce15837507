"""Configuration schemas and loading for sluggable_finder."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from sluggable_finder.core.slug import SlugGenerator

DEFAULT_TARGET_FIELD = "slug"
DEFAULT_SEPARATOR = "-"
DEFAULT_MAX_RETRIES = 3
DATABASE_URL_ENV = "SLUGGABLE_DATABASE_URL"


class FieldSource(BaseModel):
    """Slug source read from a stored column or property."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    name: str

    def read(self, record: Any) -> Any:
        return getattr(record, self.name)


class MethodSource(BaseModel):
    """Slug source produced by a zero-argument method on the record."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["method"] = "method"
    name: str

    def read(self, record: Any) -> Any:
        return getattr(record, self.name)()


SlugSource = Annotated[FieldSource | MethodSource, Field(discriminator="kind")]


class SluggableConfig(BaseModel):
    """Per-model slug settings, fixed when the model class is registered.

    Attributes:
        source: Where the raw slug text comes from.
        target_field: Column the resolved slug is written to.
        scope_field: Column whose value partitions uniqueness. None means
            slugs are unique across the whole table.
        separator: Joins alphanumeric runs and disambiguation suffixes.
        identifier_field: Primary key attribute used for numeric lookups and
            self-exclusion on update.
        max_length: Optional cap on the candidate token length.
        max_retries: Save attempts before a slug race is reported as lost.
    """

    model_config = ConfigDict(frozen=True)

    source: SlugSource
    target_field: str = DEFAULT_TARGET_FIELD
    scope_field: str | None = None
    separator: str = DEFAULT_SEPARATOR
    identifier_field: str = "id"
    max_length: int | None = Field(default=None, ge=1)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)

    @field_validator("separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        """Separators must not be confusable with slug content."""
        if not v:
            raise ValueError("Separator cannot be empty")
        if any(ch.isascii() and ch.isalnum() for ch in v):
            raise ValueError("Separator cannot contain ASCII letters or digits")
        return v

    @property
    def generator(self) -> SlugGenerator:
        """Slug generator matching this configuration."""
        return SlugGenerator(separator=self.separator, max_length=self.max_length)

    def read_source(self, record: Any) -> Any:
        """Read the raw slug source from a record."""
        return self.source.read(record)

    def scope_value(self, record: Any) -> Any:
        """Scope value of a record, or None when slugs are unscoped."""
        if self.scope_field is None:
            return None
        return getattr(record, self.scope_field)

    def identifier(self, record: Any) -> Any:
        """Primary key of a record, None until it has been saved."""
        return getattr(record, self.identifier_field, None)


class StoreSettings(BaseModel):
    """Connection settings for the SQL record store."""

    database_url: str | None = None
    echo: bool = False

    def get_database_url(self) -> str:
        """Get database URL from settings or environment."""
        url = self.database_url or os.environ.get(DATABASE_URL_ENV)
        if not url:
            msg = f"Database URL required. Set {DATABASE_URL_ENV} env var or database_url in settings."
            raise ValueError(msg)
        return url


def load_settings(path: str | Path) -> StoreSettings:
    """Load and validate store settings from a YAML file.

    Args:
        path: Path to YAML settings file.

    Returns:
        Validated StoreSettings instance.

    Raises:
        FileNotFoundError: If the settings file doesn't exist.
        pydantic.ValidationError: If the settings are invalid.
    """
    settings_path = Path(path)
    if not settings_path.exists():
        msg = f"Settings file not found: {settings_path}"
        raise FileNotFoundError(msg)

    with settings_path.open() as f:
        data = yaml.safe_load(f) or {}

    return StoreSettings.model_validate(data)
