"""Mapper protocols.

A row is a ``dict`` of column label to value, in result-set column order.
Query builders accept either a plain ``RowMapper`` callable or an object
implementing ``Mapper``; both are reduced to a row callable before
execution.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

Row = dict[str, Any]
RowMapper = Callable[[Row], T]


class ResultRow(dict):  # type: ignore[type-arg]
    """Row dict that also records the width of the result set.

    Repeated column labels collapse into one key, so ``column_count`` can be
    larger than ``len(row)``.
    """

    def __init__(self, items: Any, column_count: int) -> None:
        super().__init__(items)
        self.column_count = column_count


class Mapper(Protocol[T_co]):
    """Base mapper protocol."""

    def map_one(self, row: Row) -> T_co:
        """Map a single row dict to a target object."""
        ...

    def map_many(self, rows: list[Row]) -> list[T_co]:
        """Map multiple row dicts to a list of target objects."""
        ...
