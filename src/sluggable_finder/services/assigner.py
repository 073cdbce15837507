"""Compute and write a record's slug before it is persisted."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import inspect

from sluggable_finder.core.config import SluggableConfig

from .resolver import UniquenessResolver
from .storage.base import RecordStore

logger = structlog.get_logger()


class SlugAssigner:
    """Fill the target field of a record from its configured source."""

    def __init__(self, model: type, config: SluggableConfig, store: RecordStore) -> None:
        self._model = model
        self._config = config
        self._generator = config.generator
        self.resolver = UniquenessResolver(model, config, store)

    def candidate(self, record: Any) -> str:
        """Normalized source value of a record."""
        return self._generator.normalize(self._config.read_source(record))

    def _source_unchanged(self, record: Any) -> bool:
        """True for a stored record whose source column carries no pending change."""
        source = self._config.source
        if source.kind != "field":
            return False
        state = inspect(record, raiseerr=False)
        if state is None or state.key is None or source.name not in state.mapper.column_attrs:
            return False
        return not state.attrs[source.name].history.has_changes()

    def _keeps(self, record: Any, candidate: str, current: str | None, taken: set[str]) -> bool:
        if current is None or current in taken or not self._generator.in_family(candidate, current):
            return False
        return current == candidate or candidate in taken or self._source_unchanged(record)

    def assign(self, record: Any) -> str | None:
        """Write the resolved slug into the record and return it.

        An empty candidate clears the target field without querying the
        store. A current slug nobody else in scope holds is kept when it is
        the candidate itself, when the candidate is taken and the slug is one
        of its suffixed forms, or when the source column of a stored record
        has not been modified since it was loaded.

        Raises:
            StoreUnavailable: If the collision query fails.
        """
        target = self._config.target_field
        candidate = self.candidate(record)
        if not candidate:
            logger.warning("slug_source_empty", model=self._model.__name__, id=self._config.identifier(record))
            setattr(record, target, None)
            return None

        current = getattr(record, target, None)
        taken = self.resolver.taken_tokens(
            candidate,
            scope_value=self._config.scope_value(record),
            exclude_id=self._config.identifier(record),
        )
        if self._keeps(record, candidate, current, taken):
            logger.debug("slug_kept", model=self._model.__name__, slug=current)
            return current

        slug = self.resolver.pick(candidate, taken)
        setattr(record, target, slug)
        logger.debug("slug_assigned", model=self._model.__name__, candidate=candidate, slug=slug)
        return slug
