"""Slug-aware save and lookup entry points over a record store."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

import structlog
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt

from sluggable_finder.core.conditions import QueryConditions, as_conditions
from sluggable_finder.core.errors import SlugConflictError, UniquenessRaceLost
from sluggable_finder.sluggable import sluggable_config

from .assigner import SlugAssigner
from .finder import DualModeFinder, is_integer_param
from .storage.base import RecordStore

logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "slug_conflict_retry",
        attempt=retry_state.attempt_number,
        slug=getattr(exc, "slug", None),
    )


class RecordView(Generic[T]):
    """A model type narrowed by query conditions.

    Views are immutable; ``where`` and ``filter_by`` return narrower views.
    Lookups through a view behave exactly like repository lookups with the
    view's conditions passed in.
    """

    def __init__(self, repository: SluggableRepository, model: type[T], conditions: QueryConditions | None = None) -> None:
        self._repository = repository
        self.model = model
        self.conditions = as_conditions(conditions)

    def where(self, *clauses: Any) -> RecordView[T]:
        return RecordView(self._repository, self.model, self.conditions.and_(*clauses))

    def filter_by(self, **values: Any) -> RecordView[T]:
        return self.where(QueryConditions.match(self.model, **values))

    def all(self) -> list[T]:
        return self._repository.store.query(self.model, self.conditions)

    def find(self, param: Any) -> T:
        return self._repository.find(self.model, param, self.conditions)

    def find_with_slug(self, params: Iterable[Any]) -> list[T]:
        return self._repository.find_many(self.model, params, self.conditions)


class SluggableRepository:
    """Save records with generated slugs and look them up by id or slug.

    Usage:
        repo = SluggableRepository(SQLModelRecordStore(engine))
        item = repo.save(Item(title="Hello World"))   # item.slug == "hello-world"
        repo.view(Item).filter_by(published=True).find("hello-world")
    """

    def __init__(
        self,
        store: RecordStore,
        is_identifier: Callable[[Any], bool] = is_integer_param,
        to_identifier: Callable[[Any], Any] = int,
    ) -> None:
        self.store = store
        self.finder = DualModeFinder(store, is_identifier=is_identifier, to_identifier=to_identifier)
        self._assigners: dict[type, SlugAssigner] = {}

    def assigner(self, model: type) -> SlugAssigner:
        """Slug assigner for a registered model, built on first use."""
        if model not in self._assigners:
            self._assigners[model] = SlugAssigner(model, sluggable_config(model), self.store)
        return self._assigners[model]

    def save(self, record: R) -> R:
        """Assign the slug and persist the record in one store write.

        A write rejected by the slug unique constraint is retried with a
        fresh collision query, up to the model's ``max_retries`` attempts.

        Raises:
            StoreUnavailable: If the store fails; nothing is written.
            UniquenessRaceLost: If every attempt lost a slug race.
        """
        model = type(record)
        config = sluggable_config(model)
        assigner = self.assigner(model)
        retrying = Retrying(
            stop=stop_after_attempt(config.max_retries),
            retry=retry_if_exception_type(SlugConflictError),
            before_sleep=_log_retry,
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    assigner.assign(record)
                    self.store.save(record)
        except SlugConflictError as exc:
            logger.error("slug_race_lost", model=model.__name__, slug=exc.slug, attempts=config.max_retries)
            raise UniquenessRaceLost(assigner.candidate(record), config.max_retries) from exc
        return record

    def delete(self, record: Any) -> None:
        self.store.delete(record)

    def find(self, model: type[T], param: Any, conditions: QueryConditions | None = None) -> T:
        """Find one record by identifier or slug; raises NotFound."""
        return self.finder.find_by_param(model, param, conditions)

    def find_many(self, model: type[T], params: Iterable[Any], conditions: QueryConditions | None = None) -> list[T]:
        """Find records for identifiers and slugs; raises NotFound if any is missing."""
        return self.finder.find_many_with_slug(model, params, conditions)

    def view(self, model: type[T]) -> RecordView[T]:
        """Unrestricted view over a registered model."""
        sluggable_config(model)
        return RecordView(self, model)


class AsyncSluggableRepository:
    """Run SluggableRepository operations on a worker thread for async callers."""

    def __init__(self, repository: SluggableRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> SluggableRepository:
        return self._repository

    async def _run(self, fn: Callable[..., R], *args: Any) -> R:
        return await asyncio.to_thread(fn, *args)

    async def save(self, record: R) -> R:
        return await self._run(self._repository.save, record)

    async def delete(self, record: Any) -> None:
        await self._run(self._repository.delete, record)

    async def find(self, model: type[T], param: Any, conditions: QueryConditions | None = None) -> T:
        return await self._run(self._repository.find, model, param, conditions)

    async def find_many(
        self, model: type[T], params: Iterable[Any], conditions: QueryConditions | None = None
    ) -> list[T]:
        return await self._run(self._repository.find_many, model, list(params), conditions)
