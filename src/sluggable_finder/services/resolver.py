"""Collision lookup and numeric disambiguation of candidate slugs."""

from __future__ import annotations

from typing import Any

import structlog

from sluggable_finder.core.conditions import QueryConditions
from sluggable_finder.core.config import SluggableConfig
from sluggable_finder.core.errors import EmptySourceValue

from .storage.base import RecordStore

logger = structlog.get_logger()


class UniquenessResolver:
    """Find a free slug for a candidate within its scope.

    Usage:
        resolver = UniquenessResolver(Item, config, store)
        slug = resolver.resolve("hello-world")  # "hello-world-2" if taken
    """

    def __init__(self, model: type, config: SluggableConfig, store: RecordStore) -> None:
        self._model = model
        self._config = config
        self._store = store
        self._generator = config.generator

    def collision_conditions(self, candidate: str, scope_value: Any = None, exclude_id: Any = None) -> QueryConditions:
        """Conditions selecting the candidate and its suffixed variants."""
        target = getattr(self._model, self._config.target_field)
        prefix = candidate + self._config.separator
        conditions = QueryConditions.where((target == candidate) | target.startswith(prefix, autoescape=True))
        if self._config.scope_field is not None:
            conditions = conditions & QueryConditions.match(self._model, **{self._config.scope_field: scope_value})
        if exclude_id is not None:
            conditions = conditions & (getattr(self._model, self._config.identifier_field) != exclude_id)
        return conditions

    def taken_tokens(self, candidate: str, scope_value: Any = None, exclude_id: Any = None) -> set[str]:
        """Slugs in the candidate's family already held by other records.

        Raises:
            EmptySourceValue: If the candidate is empty.
            StoreUnavailable: If the collision query fails.
        """
        if not candidate:
            raise EmptySourceValue("Cannot resolve an empty slug candidate")
        records = self._store.query(self._model, self.collision_conditions(candidate, scope_value, exclude_id))
        taken = set()
        for record in records:
            token = getattr(record, self._config.target_field)
            if self._generator.in_family(candidate, token):
                taken.add(token)
        return taken

    def pick(self, candidate: str, taken: set[str]) -> str:
        """First free slug: the candidate itself, else the lowest free suffix from 2."""
        if not taken:
            return candidate
        n = 2
        while self._generator.with_suffix(candidate, n) in taken:
            n += 1
        return self._generator.with_suffix(candidate, n)

    def resolve(self, candidate: str, scope_value: Any = None, exclude_id: Any = None) -> str:
        """Disambiguate a candidate against existing records.

        Args:
            candidate: Normalized, non-empty token.
            scope_value: Value of the scope field for the record being saved.
            exclude_id: Identifier of the record being saved, if it exists.

        Returns:
            The candidate or its first free ``-n`` variant.
        """
        taken = self.taken_tokens(candidate, scope_value, exclude_id)
        slug = self.pick(candidate, taken)
        logger.debug("slug_resolved", model=self._model.__name__, candidate=candidate, slug=slug, taken=len(taken))
        return slug
