"""Pytest fixtures for sluggable_finder tests."""

import pytest
from sample_models import Category

from sluggable_finder import SluggableRepository, SQLModelRecordStore
from sluggable_finder.core.config import StoreSettings
from sluggable_finder.services.storage import create_store_engine


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite engine with all test tables."""
    engine = create_store_engine(StoreSettings(database_url=f"sqlite:///{tmp_path / 'test.db'}"))
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> SQLModelRecordStore:
    return SQLModelRecordStore(engine)


@pytest.fixture
def repo(store) -> SluggableRepository:
    return SluggableRepository(store)


@pytest.fixture
def categories(store) -> tuple[Category, Category]:
    """Two saved categories."""
    first = Category(name="Category one")
    second = Category(name="Category two")
    store.save(first)
    store.save(second)
    return first, second
