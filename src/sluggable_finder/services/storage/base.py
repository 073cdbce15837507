"""Record store contract consumed by the slug services."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

from sluggable_finder.core.conditions import QueryConditions

T = TypeVar("T")


class RecordStore(Protocol):
    """Persistence capability the slug services depend on.

    Implementations raise ``StoreUnavailable`` for any backend failure,
    ``SlugConflictError`` from ``save`` when the slug unique constraint
    rejects the write, and ``NotFound`` from ``native_find_by_id``.
    """

    def query(self, model: type[T], conditions: QueryConditions) -> list[T]: ...

    def query_one(self, model: type[T], conditions: QueryConditions) -> T | None: ...

    def save(self, record: Any) -> None: ...

    def delete(self, record: Any) -> None: ...

    def native_find_by_id(self, model: type[T], identifier: Any, conditions: QueryConditions) -> T: ...
