"""Composable query restrictions passed through to the record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, true

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class QueryConditions:
    """Immutable AND-combination of SQLAlchemy boolean clauses.

    Finders and resolvers only ever combine conditions with ``and_``; the
    clause list itself is read by the store when it builds a statement.
    """

    __slots__ = ("_clauses",)

    def __init__(self, clauses: tuple[ColumnElement[bool], ...] = ()) -> None:
        self._clauses = tuple(clauses)

    @classmethod
    def where(cls, *clauses: ColumnElement[bool]) -> QueryConditions:
        """Build conditions from SQLAlchemy expressions."""
        return cls(clauses)

    @classmethod
    def match(cls, model: type, **values: Any) -> QueryConditions:
        """Build equality conditions, using IS NULL for None values."""
        clauses = []
        for name, value in values.items():
            column = getattr(model, name)
            clauses.append(column.is_(None) if value is None else column == value)
        return cls(tuple(clauses))

    def and_(self, *others: QueryConditions | ColumnElement[bool] | None) -> QueryConditions:
        """Return new conditions that also require every argument."""
        clauses = list(self._clauses)
        for other in others:
            if other is None:
                continue
            if isinstance(other, QueryConditions):
                clauses.extend(other._clauses)
            else:
                clauses.append(other)
        return QueryConditions(tuple(clauses))

    def __and__(self, other: QueryConditions | ColumnElement[bool]) -> QueryConditions:
        return self.and_(other)

    def __bool__(self) -> bool:
        return bool(self._clauses)

    def __len__(self) -> int:
        return len(self._clauses)

    def __repr__(self) -> str:
        return f"QueryConditions({', '.join(str(c) for c in self._clauses)})"

    def clause(self) -> ColumnElement[bool]:
        """Single clause for a WHERE; always true when empty."""
        if not self._clauses:
            return true()
        return and_(*self._clauses)


def as_conditions(value: QueryConditions | None) -> QueryConditions:
    """Treat a missing argument as "no restriction"."""
    return value if value is not None else QueryConditions()
