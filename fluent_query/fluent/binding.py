"""Parameter accumulation shared by the statement builders.

A builder binds its parameters in one of two mutually exclusive modes:

* named mode: ``bind(name, value)`` / ``bind_values(mapping)`` fill a
  MapParameterSource; binding a name again replaces the previous value.
* record mode: ``bind_record(record)`` makes the attributes of a single
  object the parameter values, read when the statement runs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar

from fluent_query.core.exceptions import InvalidUsageError
from fluent_query.core.params import MapParameterSource, ParameterSource, RecordParameterSource

B = TypeVar("B", bound="Bindable")

_MIXED_MODES = "Cannot use both bind_record(record) and bind(name, value) on the same statement"


class Bindable(Protocol):
    """Capability shared by QueryBuilder and UpdateBuilder."""

    def bind(self: B, name: str, value: Any) -> B: ...

    def bind_values(self: B, values: Mapping[str, Any]) -> B: ...

    def bind_record(self: B, record: Any) -> B: ...

    @property
    def bound_parameters(self) -> ParameterSource: ...


class ParameterBinder:
    """Holds the parameters bound to one statement."""

    def __init__(self) -> None:
        self._map_source: MapParameterSource | None = None
        self._record_source: RecordParameterSource | None = None

    def bind(self, name: str, value: Any) -> None:
        self.map_source.add_value(name, value)

    def bind_values(self, values: Mapping[str, Any]) -> None:
        self.map_source.add_values(values)

    def bind_record(self, record: Any) -> None:
        if self._map_source is not None:
            raise InvalidUsageError(_MIXED_MODES)
        self._record_source = RecordParameterSource(record)

    @property
    def map_source(self) -> MapParameterSource:
        """The named-mode source, created on first use.

        Raises:
            InvalidUsageError: if a record has already been bound.
        """
        if self._record_source is not None:
            raise InvalidUsageError(_MIXED_MODES)
        if self._map_source is None:
            self._map_source = MapParameterSource()
        return self._map_source

    @property
    def source(self) -> ParameterSource:
        """The bound parameters; an empty source when nothing was bound."""
        if self._record_source is not None:
            return self._record_source
        return self.map_source


class _BindingMixin:
    """Delegates the Bindable methods to a ParameterBinder."""

    _binder: ParameterBinder

    def bind(self: B, name: str, value: Any) -> B:
        """Bind *value* to the ``:name`` placeholder.

        Returns the builder so calls can be chained. Binding the same name
        again replaces the earlier value.
        """
        self._binder.bind(name, value)  # type: ignore[attr-defined]
        return self

    def bind_values(self: B, values: Mapping[str, Any]) -> B:
        """Bind several named values at once."""
        self._binder.bind_values(values)  # type: ignore[attr-defined]
        return self

    def bind_record(self: B, record: Any) -> B:
        """Use the attributes of *record* as the statement's parameters."""
        self._binder.bind_record(record)  # type: ignore[attr-defined]
        return self

    @property
    def bound_parameters(self) -> ParameterSource:
        """Parameters bound so far; never None."""
        return self._binder.source

    @property
    def map_bound_parameters(self) -> MapParameterSource:
        """The mutable named-parameter source, for amending bindings in place."""
        return self._binder.map_source
