from .base import RecordStore
from .sql_store import SQLModelRecordStore, create_store_engine

__all__ = ["RecordStore", "SQLModelRecordStore", "create_store_engine"]
