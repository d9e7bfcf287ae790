"""Storage-agnostic filter predicates for timetable queries.

Queries describe what they want as a small tree of predicates, and
``compile_predicate`` turns that tree into a SQLAlchemy expression for a
given mapped model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from sqlalchemy import and_, inspect, or_, true
from sqlalchemy.sql.elements import ColumnElement

from app.core.exceptions import ValidationError


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class LessThan:
    field: str
    value: Any


@dataclass(frozen=True)
class GreaterThan:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class And:
    predicates: tuple["Predicate", ...]


@dataclass(frozen=True)
class Or:
    predicates: tuple["Predicate", ...]


Predicate = Union[Equals, LessThan, GreaterThan, In, And, Or]


def all_of(*predicates: Predicate) -> And:
    return And(tuple(predicates))


def any_of(*predicates: Predicate) -> Or:
    return Or(tuple(predicates))


def _column(model: type, field: str):
    if field not in inspect(model).columns:
        raise ValidationError(
            f"Unknown filter field '{field}' for {model.__name__}",
            details={"field": field},
        )
    return getattr(model, field)


def compile_predicate(model: type, predicate: Predicate) -> ColumnElement[bool]:
    if isinstance(predicate, Equals):
        column = _column(model, predicate.field)
        if predicate.value is None:
            return column.is_(None)
        return column == predicate.value
    if isinstance(predicate, LessThan):
        return _column(model, predicate.field) < predicate.value
    if isinstance(predicate, GreaterThan):
        return _column(model, predicate.field) > predicate.value
    if isinstance(predicate, In):
        return _column(model, predicate.field).in_(list(predicate.values))
    if isinstance(predicate, And):
        if not predicate.predicates:
            return true()
        return and_(*(compile_predicate(model, item) for item in predicate.predicates))
    if isinstance(predicate, Or):
        if not predicate.predicates:
            raise ValidationError("An 'or' filter needs at least one branch")
        return or_(*(compile_predicate(model, item) for item in predicate.predicates))
    raise ValidationError(f"Unsupported filter predicate: {type(predicate).__name__}")
