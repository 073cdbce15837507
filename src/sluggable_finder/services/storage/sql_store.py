"""SQLModel-backed record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import NullPool
from sqlmodel import Session, SQLModel, create_engine, select

from sluggable_finder.core.conditions import QueryConditions
from sluggable_finder.core.config import StoreSettings
from sluggable_finder.core.errors import NotFound, SlugConflictError, StoreUnavailable
from sluggable_finder.sluggable import find_config

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = structlog.get_logger()

T = TypeVar("T")


def create_store_engine(settings: StoreSettings) -> Engine:
    """Create the SQLAlchemy engine and any missing tables."""
    url = settings.get_database_url()
    # NullPool keeps file-backed SQLite usable from worker threads
    engine = create_engine(url, echo=settings.echo, poolclass=NullPool)
    SQLModel.metadata.create_all(engine)
    logger.info("store_init", url=engine.url.render_as_string(hide_password=True))
    return engine


def _primary_key(model: type) -> Any:
    return inspect(model).primary_key[0]


def _column_snapshot(record: Any) -> dict[str, Any]:
    """Loaded column values of a record, keyed by attribute name."""
    state = inspect(record)
    return {attr.key: state.dict[attr.key] for attr in state.mapper.column_attrs if attr.key in state.dict}


def _restore(record: Any, snapshot: dict[str, Any]) -> None:
    for key, value in snapshot.items():
        setattr(record, key, value)


def _is_slug_conflict(exc: IntegrityError, target_field: str) -> bool:
    message = str(exc.orig).lower()
    return ("unique" in message or "duplicate" in message) and target_field.lower() in message


class SQLModelRecordStore:
    """Record store over a SQLAlchemy engine, one session per call.

    Records come back detached with their columns loaded, so they can be
    read, modified and handed back to ``save`` later.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def _session(self) -> Session:
        return Session(self._engine, expire_on_commit=False)

    def query(self, model: type[T], conditions: QueryConditions) -> list[T]:
        """All records of a model matching the conditions, by primary key."""
        statement = select(model).where(conditions.clause()).order_by(_primary_key(model))
        try:
            with self._session() as session:
                return list(session.exec(statement).all())
        except SQLAlchemyError as exc:
            logger.error("store_error", operation="query", model=model.__name__, error=str(exc))
            raise StoreUnavailable(str(exc)) from exc

    def query_one(self, model: type[T], conditions: QueryConditions) -> T | None:
        """First matching record by primary key, or None."""
        statement = select(model).where(conditions.clause()).order_by(_primary_key(model)).limit(1)
        try:
            with self._session() as session:
                return session.exec(statement).first()
        except SQLAlchemyError as exc:
            logger.error("store_error", operation="query_one", model=model.__name__, error=str(exc))
            raise StoreUnavailable(str(exc)) from exc

    def native_find_by_id(self, model: type[T], identifier: Any, conditions: QueryConditions) -> T:
        """Look a record up by primary key within the given conditions."""
        record = self.query_one(model, conditions.and_(_primary_key(model) == identifier))
        if record is None:
            raise NotFound(model, identifier)
        return record

    def save(self, record: Any) -> None:
        """Insert or update a record in a single transaction.

        Raises:
            SlugConflictError: The slug unique constraint rejected the write.
            StoreUnavailable: Any other database failure.
        """
        config = find_config(type(record))
        snapshot = _column_snapshot(record)
        with self._session() as session:
            session.add(record)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                _restore(record, snapshot)
                if config is not None and _is_slug_conflict(exc, config.target_field):
                    raise SlugConflictError(getattr(record, config.target_field)) from exc
                logger.error("store_error", operation="save", model=type(record).__name__, error=str(exc))
                raise StoreUnavailable(str(exc)) from exc
            except SQLAlchemyError as exc:
                session.rollback()
                _restore(record, snapshot)
                logger.error("store_error", operation="save", model=type(record).__name__, error=str(exc))
                raise StoreUnavailable(str(exc)) from exc

    def delete(self, record: Any) -> None:
        """Delete a record."""
        try:
            with self._session() as session:
                session.delete(session.merge(record))
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("store_error", operation="delete", model=type(record).__name__, error=str(exc))
            raise StoreUnavailable(str(exc)) from exc
