"""Lookups that accept either a primary key or a slug."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

import structlog

from sluggable_finder.core.conditions import QueryConditions, as_conditions
from sluggable_finder.core.errors import NotFound
from sluggable_finder.sluggable import sluggable_config

from .storage.base import RecordStore

logger = structlog.get_logger()

T = TypeVar("T")

# signed 64-bit, the widest integer primary key the supported databases store
MIN_IDENTIFIER = -(2**63)
MAX_IDENTIFIER = 2**63 - 1


def is_integer_param(param: Any) -> bool:
    """True for ints and for strings in canonical integer form ("7", "-3").

    Strings made only of digits are always read as identifiers, so a slug
    such as "123" cannot be reached through the default rule.
    """
    if isinstance(param, bool):
        return False
    if isinstance(param, int):
        return True
    if not isinstance(param, str):
        return False
    try:
        return str(int(param)) == param
    except ValueError:
        return False


def _storable(identifier: Any) -> bool:
    return not isinstance(identifier, int) or MIN_IDENTIFIER <= identifier <= MAX_IDENTIFIER


class DualModeFinder:
    """Resolve external params to records by identifier or by slug.

    Args:
        store: Record store used for every lookup.
        is_identifier: Rule deciding whether a param is a primary key.
        to_identifier: Converts a param accepted by ``is_identifier`` into a
            primary key value.
    """

    def __init__(
        self,
        store: RecordStore,
        is_identifier: Callable[[Any], bool] = is_integer_param,
        to_identifier: Callable[[Any], Any] = int,
    ) -> None:
        self._store = store
        self._is_identifier = is_identifier
        self._to_identifier = to_identifier

    def find_by_param(self, model: type[T], param: Any, conditions: QueryConditions | None = None) -> T:
        """Find exactly one record by identifier or slug within the conditions.

        Raises:
            NotFound: If no record matches, whichever lookup mode was used.
            StoreUnavailable: If the store query fails.
        """
        config = sluggable_config(model)
        conditions = as_conditions(conditions)
        if self._is_identifier(param):
            identifier = self._to_identifier(param)
            try:
                if not _storable(identifier):
                    raise NotFound(model, param)
                return self._store.native_find_by_id(model, identifier, conditions)
            except NotFound:
                logger.debug("record_not_found", model=model.__name__, param=param, mode="id")
                raise

        record = self._store.query_one(model, conditions & (getattr(model, config.target_field) == param))
        if record is None:
            logger.debug("record_not_found", model=model.__name__, param=param, mode="slug")
            raise NotFound(model, param)
        return record

    def find_many_with_slug(
        self, model: type[T], params: Iterable[Any], conditions: QueryConditions | None = None
    ) -> list[T]:
        """Find records for a mix of identifiers and slugs, in param order.

        Raises:
            NotFound: If any param matches no record; lists every missing param.
            StoreUnavailable: If the store query fails.
        """
        config = sluggable_config(model)
        conditions = as_conditions(conditions)
        params = list(params)
        identifiers = {p: self._to_identifier(p) for p in params if self._is_identifier(p)}
        ids = {i for i in identifiers.values() if _storable(i)}
        slugs = {p for p in params if not self._is_identifier(p)}

        by_id: dict[Any, T] = {}
        by_slug: dict[Any, T] = {}
        if ids:
            id_column = getattr(model, config.identifier_field)
            for record in self._store.query(model, conditions & id_column.in_(ids)):
                by_id[config.identifier(record)] = record
        if slugs:
            slug_column = getattr(model, config.target_field)
            for record in self._store.query(model, conditions & slug_column.in_(slugs)):
                by_slug.setdefault(getattr(record, config.target_field), record)

        results: list[T] = []
        missing = []
        for param in params:
            record = by_id.get(identifiers[param]) if self._is_identifier(param) else by_slug.get(param)
            if record is None:
                missing.append(param)
            else:
                results.append(record)
        if missing:
            logger.debug("record_not_found", model=model.__name__, params=missing, mode="many")
            raise NotFound(model, missing)
        return results
