"""fluent-query exception hierarchy.

Driver exceptions never escape unwrapped: they surface as ExecutionError
with the original exception chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class FluentQueryError(Exception):
    """Base exception for all fluent-query errors."""


# --- Usage ---


class InvalidUsageError(FluentQueryError):
    """Raised when the API is used in a way it does not support."""


# --- Data access ---


class DataAccessError(FluentQueryError):
    """Base for errors raised while talking to the database."""


class ExecutionError(DataAccessError):
    """Raised when the driver rejects or fails a statement."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        self.detail = detail
        super().__init__(f"Statement failed: {detail} [SQL: {sql}]")


class ParameterBindingError(ExecutionError):
    """Raised when a statement parameter has no usable value."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        self.detail = detail
        DataAccessError.__init__(self, f"Parameter binding error: {detail} [SQL: {sql}]")


class IncorrectResultSizeError(DataAccessError):
    """Raised when a statement returns a different number of rows than expected."""

    def __init__(self, expected_size: int, actual_size: int) -> None:
        self.expected_size = expected_size
        self.actual_size = actual_size
        super().__init__(
            f"Incorrect result size: expected {expected_size}, actual {actual_size}"
        )


class EmptyResultError(IncorrectResultSizeError):
    """Raised when exactly one row was expected but none came back."""


class IncorrectColumnCountError(DataAccessError):
    """Raised when a single-column mapping receives a row of another width."""

    def __init__(self, expected_count: int, actual_count: int) -> None:
        self.expected_count = expected_count
        self.actual_count = actual_count
        super().__init__(
            f"Incorrect column count: expected {expected_count}, actual {actual_count}"
        )


class KeyRetrievalError(DataAccessError):
    """Raised when a generated key cannot be returned as a number."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"The generated key type is not supported. "
            f"Unable to convert {value!r} ({type(value).__name__}) to a number"
        )


# --- Mapping ---


class MappingError(FluentQueryError):
    """Base for mapping errors."""


class ColumnMismatchError(MappingError):
    """Raised when required fields cannot be mapped from row columns."""

    def __init__(self, target_class: str, missing_fields: list[str], detail: str = "") -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        message = detail or f"missing fields {missing_fields}"
        super().__init__(f"Cannot map to {target_class}: {message}")


class StrictModeViolation(MappingError):
    """Raised in strict mode when a column has no matching property."""


class TypeConversionError(MappingError):
    """Raised when a column value cannot be converted to the requested type."""

    def __init__(self, value: Any, target_type: type, detail: str = "") -> None:
        self.value = value
        self.target_type = target_type
        type_name = getattr(target_type, "__name__", repr(target_type))
        message = f"Cannot convert {value!r} to {type_name}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


# --- Adapter ---


class AdapterError(FluentQueryError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
