"""fluent-query - fluent builders over named-parameter SQL."""

from __future__ import annotations

from fluent_query.core.connection import ConnectionConfig, ConnectionManager
from fluent_query.core.enums import DatabaseBackend
from fluent_query.core.exceptions import (
    AdapterError,
    ColumnMismatchError,
    ConnectionError,  # noqa: A004
    DataAccessError,
    EmptyResultError,
    ExecutionError,
    FluentQueryError,
    IncorrectColumnCountError,
    IncorrectResultSizeError,
    InvalidUsageError,
    KeyRetrievalError,
    MappingError,
    ParameterBindingError,
    PoolError,
    StrictModeViolation,
    TypeConversionError,
)
from fluent_query.core.keys import GeneratedKeyHolder
from fluent_query.core.operations import FluentOperations, NamedParameterOperations
from fluent_query.core.params import MapParameterSource, ParameterSource, RecordParameterSource
from fluent_query.core.template import NamedParameterTemplate
from fluent_query.fluent import FluentTemplate, QueryBuilder, UpdateBuilder
from fluent_query.mapping.model import ModelMapper
from fluent_query.mapping.scalar import register_scalar_type, unregister_scalar_type
from fluent_query.mapping.strategy import SingleColumnRowMapper

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Templates
    "NamedParameterTemplate",
    "FluentTemplate",
    "NamedParameterOperations",
    "FluentOperations",
    # Builders
    "QueryBuilder",
    "UpdateBuilder",
    # Parameters
    "ParameterSource",
    "MapParameterSource",
    "RecordParameterSource",
    "GeneratedKeyHolder",
    # Mapping
    "ModelMapper",
    "SingleColumnRowMapper",
    "register_scalar_type",
    "unregister_scalar_type",
    # Enums
    "DatabaseBackend",
    # Exceptions
    "FluentQueryError",
    "InvalidUsageError",
    "DataAccessError",
    "ExecutionError",
    "ParameterBindingError",
    "IncorrectResultSizeError",
    "EmptyResultError",
    "IncorrectColumnCountError",
    "KeyRetrievalError",
    "MappingError",
    "ColumnMismatchError",
    "StrictModeViolation",
    "TypeConversionError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
