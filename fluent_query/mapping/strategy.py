"""Result mapping strategy.

Turns whatever a caller passes to ``fetch``/``fetch_one`` into a callable
that maps one row:

* an object with ``map_one`` (ModelMapper, SingleColumnRowMapper, ...) is
  used as-is;
* a scalar type (see ``fluent_query.mapping.scalar``) maps the single column
  of each row;
* any other class maps columns onto its properties with ModelMapper;
* any other callable is treated as a row mapper.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from fluent_query.core.exceptions import IncorrectColumnCountError, InvalidUsageError
from fluent_query.mapping.model import ModelMapper
from fluent_query.mapping.protocol import Row, RowMapper
from fluent_query.mapping.scalar import convert_value, is_scalar_type

T = TypeVar("T")


class SingleColumnRowMapper(Generic[T]):
    """Maps a one-column row to a scalar value of *required_type*.

    Raises IncorrectColumnCountError for rows of any other width. A NULL
    column maps to None.
    """

    def __init__(self, required_type: type[T]) -> None:
        self._required_type = required_type

    @property
    def required_type(self) -> type[T]:
        return self._required_type

    def map_one(self, row: Row) -> T:
        width = getattr(row, "column_count", len(row))
        if width != 1:
            raise IncorrectColumnCountError(1, width)
        value = next(iter(row.values()))
        return convert_value(value, self._required_type)  # type: ignore[no-any-return]

    def map_many(self, rows: list[Row]) -> list[T]:
        return [self.map_one(row) for row in rows]


def row_mapper_for(target: Any) -> RowMapper[Any]:
    """Resolve a result type or mapper into a row-mapping callable.

    Raises:
        InvalidUsageError: if *target* is None or neither a type nor callable.
    """
    if target is None:
        raise InvalidUsageError("A result type or row mapper is required")
    if not isinstance(target, type) and callable(getattr(target, "map_one", None)):
        return target.map_one  # type: ignore[no-any-return]
    if is_scalar_type(target):
        return SingleColumnRowMapper(target).map_one
    while hasattr(target, "__supertype__"):
        target = target.__supertype__
    if isinstance(target, type):
        return ModelMapper(target).map_one
    if callable(target):
        return target  # type: ignore[no-any-return]
    raise InvalidUsageError(
        f"Cannot map rows to {target!r}: expected a type, a mapper or a callable"
    )
