"""Sluggable Finder.

Generate unique, URL-safe slugs for SQLModel records and look records up
by slug or by primary key through one finder.
"""

from sluggable_finder.core.conditions import QueryConditions
from sluggable_finder.core.errors import NotFound, StoreUnavailable, UniquenessRaceLost
from sluggable_finder.services.repository import AsyncSluggableRepository, RecordView, SluggableRepository
from sluggable_finder.services.storage import SQLModelRecordStore, create_store_engine
from sluggable_finder.sluggable import SluggableMixin, sluggable_config, sluggable_finder

__version__ = "0.1.0"
__all__ = [
    "AsyncSluggableRepository",
    "NotFound",
    "QueryConditions",
    "RecordView",
    "SQLModelRecordStore",
    "SluggableMixin",
    "SluggableRepository",
    "StoreUnavailable",
    "UniquenessRaceLost",
    "__version__",
    "create_store_engine",
    "sluggable_config",
    "sluggable_finder",
]
