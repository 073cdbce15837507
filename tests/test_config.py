"""Tests for slug configuration, registration and store settings."""

import logging

import pydantic
import pytest
import structlog
import yaml
from sample_models import PermalinkItem, ScopedItem, SimpleItem, VirtualItem
from sqlmodel import SQLModel

from sluggable_finder import sluggable_config, sluggable_finder
from sluggable_finder.core.config import (
    DATABASE_URL_ENV,
    FieldSource,
    MethodSource,
    SluggableConfig,
    StoreSettings,
    load_settings,
)
from sluggable_finder.core.errors import (
    ConfigurationError,
    NotSluggableError,
    UnknownFieldError,
    UnknownSourceError,
)
from sluggable_finder.core.log import configure_logging


class _Plain(SQLModel):
    title: str = ""
    slug: str | None = None
    id: int | None = None

    @property
    def headline(self) -> str:
        return self.title.upper()

    def label(self) -> str:
        return f"label {self.title}"


class TestSluggableConfig:
    """Tests for SluggableConfig."""

    def test_defaults(self):
        """Test default target, separator and no scope."""
        config = SluggableConfig(source=FieldSource(name="title"))
        assert config.target_field == "slug"
        assert config.scope_field is None
        assert config.separator == "-"
        assert config.identifier_field == "id"
        assert config.max_retries == 3

    def test_is_frozen(self):
        """Test configuration cannot be changed after creation."""
        config = SluggableConfig(source=FieldSource(name="title"))
        with pytest.raises(pydantic.ValidationError):
            config.target_field = "other"

    def test_source_discriminator(self):
        """Test sources validate from plain data by kind."""
        config = SluggableConfig.model_validate({"source": {"kind": "method", "name": "label"}})
        assert isinstance(config.source, MethodSource)

    @pytest.mark.parametrize("separator", ["", "a", "-1-"])
    def test_invalid_separator(self, separator):
        """Test empty or alphanumeric separators are rejected."""
        with pytest.raises(pydantic.ValidationError):
            SluggableConfig(source=FieldSource(name="title"), separator=separator)

    def test_invalid_retries(self):
        """Test at least one save attempt is required."""
        with pytest.raises(pydantic.ValidationError):
            SluggableConfig(source=FieldSource(name="title"), max_retries=0)

    def test_readers(self):
        """Test field and method sources read from the record."""
        record = _Plain(title="Hello")
        assert FieldSource(name="title").read(record) == "Hello"
        assert FieldSource(name="headline").read(record) == "HELLO"
        assert MethodSource(name="label").read(record) == "label Hello"

    def test_scope_and_identifier(self):
        """Test scope value is None when unscoped."""
        config = SluggableConfig(source=FieldSource(name="title"))
        record = _Plain(title="x", id=5)
        assert config.scope_value(record) is None
        assert config.identifier(record) == 5


class TestRegistration:
    """Tests for the sluggable_finder decorator."""

    def test_registered_models(self):
        """Test options are stored on each model."""
        assert sluggable_config(SimpleItem).source == FieldSource(name="title")
        assert sluggable_config(VirtualItem).source == MethodSource(name="some_method")
        assert sluggable_config(PermalinkItem).target_field == "permalink"
        assert sluggable_config(ScopedItem).scope_field == "category_id"

    def test_property_source_is_field(self):
        """Test properties are read, not called."""

        @sluggable_finder("headline")
        class HeadlineItem(_Plain):
            pass

        assert isinstance(sluggable_config(HeadlineItem).source, FieldSource)

    def test_unknown_source(self):
        """Test an unknown source raises with a suggestion."""
        with pytest.raises(UnknownSourceError) as exc_info:
            @sluggable_finder("missing")
            class BadSource(_Plain):
                pass
        assert "[Suggestion]" in str(exc_info.value)

    def test_unknown_target(self):
        """Test an unknown target field is rejected."""
        with pytest.raises(UnknownFieldError, match="'to'"):
            @sluggable_finder("title", to="permalink")
            class BadTarget(_Plain):
                pass

    def test_unknown_scope(self):
        """Test an unknown scope field is rejected."""
        with pytest.raises(ConfigurationError, match="parent_id"):
            @sluggable_finder("title", scope="parent_id")
            class BadScope(_Plain):
                pass

    def test_unregistered_model(self):
        """Test reading config from an unregistered model fails."""
        with pytest.raises(NotSluggableError):
            sluggable_config(_Plain)

    def test_to_param(self):
        """Test to_param prefers the slug and falls back to the id."""
        assert SimpleItem(id=7, slug="hello-world").to_param() == "hello-world"
        assert SimpleItem(id=7, slug=None).to_param() == "7"
        assert SimpleItem(title="unsaved").to_param() is None


class TestStoreSettings:
    """Tests for StoreSettings loading."""

    def test_load_settings(self, tmp_path):
        """Test settings load from YAML."""
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.dump({"database_url": "sqlite:///x.db", "echo": True}))
        settings = load_settings(path)
        assert settings.get_database_url() == "sqlite:///x.db"
        assert settings.echo is True

    def test_load_empty_file(self, tmp_path):
        """Test an empty file yields defaults."""
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert load_settings(path) == StoreSettings()

    def test_missing_file(self, tmp_path):
        """Test a missing settings file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")

    def test_env_fallback(self, monkeypatch):
        """Test the database URL falls back to the environment."""
        monkeypatch.setenv(DATABASE_URL_ENV, "sqlite:///env.db")
        assert StoreSettings().get_database_url() == "sqlite:///env.db"

    def test_missing_url(self, monkeypatch):
        """Test a missing database URL is an error."""
        monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
        with pytest.raises(ValueError, match=DATABASE_URL_ENV):
            StoreSettings().get_database_url()


class TestConfigureLogging:
    """Tests for structlog setup."""

    def test_configures_stdlib_backed_structlog(self):
        """Test the stdlib logger factory and bound logger are installed."""
        try:
            configure_logging(logging.DEBUG)
            assert structlog.is_configured()
            config = structlog.get_config()
            assert config["wrapper_class"] is structlog.stdlib.BoundLogger
            assert isinstance(config["logger_factory"], structlog.stdlib.LoggerFactory)
        finally:
            structlog.reset_defaults()
