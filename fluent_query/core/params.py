"""Named parameters: sources of bound values and SQL placeholder handling.

Statements use ``:name`` placeholders. Before execution the placeholders a
statement references are resolved against a ParameterSource, collection
values are expanded for ``IN (:ids)`` lists, and the SQL is converted to the
driver's paramstyle. String literals and PostgreSQL ``::typecast`` syntax are
never treated as placeholders.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from fluent_query.core.exceptions import InvalidUsageError, ParameterBindingError

# Matches :name but not ::typecast and not inside words
# Negative lookbehind for : (handles ::), \w (handles mid-word colons)
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")

_COLLECTION_TYPES = (list, tuple, set, frozenset)


@runtime_checkable
class ParameterSource(Protocol):
    """Anything that can supply values for named SQL parameters."""

    def has_value(self, name: str) -> bool:
        """Return True if a value is available for *name*."""
        ...

    def get_value(self, name: str) -> Any:
        """Return the value bound to *name*."""
        ...

    def parameter_names(self) -> list[str]:
        """Return the names this source can supply."""
        ...


class MapParameterSource:
    """Name-keyed bag of explicitly bound values.

    Adding a value under an existing name replaces the earlier value.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values) if values else {}

    def add_value(self, name: str, value: Any) -> MapParameterSource:
        self._values[name] = value
        return self

    def add_values(self, values: Mapping[str, Any]) -> MapParameterSource:
        self._values.update(values)
        return self

    @property
    def values(self) -> Mapping[str, Any]:
        return MappingProxyType(self._values)

    def has_value(self, name: str) -> bool:
        return name in self._values

    def get_value(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"No value registered for parameter '{name}'") from None

    def parameter_names(self) -> list[str]:
        return list(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MapParameterSource({self._values!r})"


class RecordParameterSource:
    """Parameter values read from the attributes of a single record.

    The record may be a mapping, a Pydantic model, a dataclass instance or
    any object with plain attributes. Values are read when the statement
    executes, not when the record is bound.
    """

    def __init__(self, record: Any) -> None:
        if record is None:
            raise InvalidUsageError("Cannot bind a None record")
        self._record = record

    @property
    def record(self) -> Any:
        return self._record

    def has_value(self, name: str) -> bool:
        if isinstance(self._record, Mapping):
            return name in self._record
        return hasattr(self._record, name)

    def get_value(self, name: str) -> Any:
        if isinstance(self._record, Mapping):
            return self._record[name]
        return getattr(self._record, name)

    def parameter_names(self) -> list[str]:
        record = self._record
        if isinstance(record, Mapping):
            return list(record)
        if hasattr(type(record), "model_fields"):
            return list(type(record).model_fields)
        if dataclasses.is_dataclass(record):
            return [f.name for f in dataclasses.fields(record)]
        try:
            return [name for name in vars(record) if not name.startswith("_")]
        except TypeError:
            return []

    def __repr__(self) -> str:
        return f"RecordParameterSource({self._record!r})"


def as_parameter_source(params: ParameterSource | Mapping[str, Any] | None) -> ParameterSource:
    """Normalize *params* to a ParameterSource.

    * ``None`` → empty MapParameterSource.
    * Mapping → MapParameterSource over a copy of the mapping.
    * ParameterSource → returned as-is.
    """
    if params is None:
        return MapParameterSource()
    if isinstance(params, Mapping):
        return MapParameterSource(params)
    if isinstance(params, ParameterSource):
        return params
    raise InvalidUsageError(
        f"Expected a mapping or ParameterSource, got {type(params).__name__}"
    )


def _split_literals(sql: str) -> list[tuple[bool, str]]:
    """Split *sql* into ``(is_literal, text)`` segments."""
    segments: list[tuple[bool, str]] = []
    last_end = 0
    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            segments.append((False, sql[last_end:start]))
        segments.append((True, match.group()))
        last_end = end
    if last_end < len(sql):
        segments.append((False, sql[last_end:]))
    return segments


@lru_cache(maxsize=256)
def parse_parameter_names(sql: str) -> tuple[str, ...]:
    """Return the distinct ``:name`` placeholders of *sql* in order of appearance."""
    seen: dict[str, None] = {}
    for is_literal, text in _split_literals(sql):
        if is_literal:
            continue
        for name in _PARAM_PATTERN.findall(text):
            seen.setdefault(name, None)
    return tuple(seen)


def resolve_parameters(sql: str, source: ParameterSource) -> dict[str, Any]:
    """Collect the values *sql* references from *source*.

    Raises:
        ParameterBindingError: if a referenced parameter has no value.
    """
    resolved: dict[str, Any] = {}
    for name in parse_parameter_names(sql):
        if not source.has_value(name):
            raise ParameterBindingError(sql, f"No value supplied for the SQL parameter '{name}'")
        resolved[name] = source.get_value(name)
    return resolved


def expand_collection_params(sql: str, params: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    """Expand collection-valued parameters into one placeholder per element.

    ``WHERE id IN (:ids)`` with ``ids=[1, 2]`` becomes
    ``WHERE id IN (:ids__0, :ids__1)`` with ``ids__0=1, ids__1=2``.
    """
    collections = {
        name: list(value) for name, value in params.items() if isinstance(value, _COLLECTION_TYPES)
    }
    if not collections:
        return sql, params

    for name, items in collections.items():
        if not items:
            raise ParameterBindingError(sql, f"Empty collection bound to parameter '{name}'")

    def _expand(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in collections:
            return match.group()
        return ", ".join(f":{name}__{i}" for i in range(len(collections[name])))

    parts = [
        text if is_literal else _PARAM_PATTERN.sub(_expand, text)
        for is_literal, text in _split_literals(sql)
    ]

    expanded = {name: value for name, value in params.items() if name not in collections}
    for name, items in collections.items():
        for i, item in enumerate(items):
            expanded[f"{name}__{i}"] = item
    return "".join(parts), expanded


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals.

    Literal percent signs are doubled so the driver does not read them as
    placeholders.
    """
    parts: list[str] = []
    for is_literal, text in _split_literals(sql):
        text = text.replace("%", "%%")
        if not is_literal:
            text = _PARAM_PATTERN.sub(r"%(\1)s", text)
        parts.append(text)
    return "".join(parts)


def _strip_trailing_comment(sql: str) -> str:
    """Drop a ``-- comment`` on the last line of *sql*, outside string literals."""
    segments = _split_literals(sql)
    if not segments or segments[-1][0]:
        return sql
    text = segments[-1][1]
    comment = text.find("--", text.rfind("\n") + 1)
    if comment == -1:
        return sql
    return "".join(part for _, part in segments[:-1]) + text[:comment]


def append_returning(sql: str, key_columns: list[str] | tuple[str, ...]) -> str:
    """Append a ``RETURNING`` clause for *key_columns* to a DML statement."""
    if not key_columns:
        raise InvalidUsageError("At least one key column name is required")
    statement = _strip_trailing_comment(sql.rstrip()).rstrip().rstrip(";").rstrip()
    return f"{statement} RETURNING {', '.join(key_columns)}"
