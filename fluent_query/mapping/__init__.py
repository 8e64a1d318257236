"""Mapping layer - transform row dicts into values and typed objects."""

from __future__ import annotations

from fluent_query.mapping.model import ModelMapper, model_plan, normalize_name
from fluent_query.mapping.plan import ModelKind, ModelPlan, PropertyPlan
from fluent_query.mapping.protocol import Mapper, ResultRow, Row, RowMapper
from fluent_query.mapping.scalar import (
    convert_value,
    is_scalar_type,
    register_scalar_type,
    unregister_scalar_type,
)
from fluent_query.mapping.strategy import SingleColumnRowMapper, row_mapper_for

__all__ = [
    "Mapper",
    "ResultRow",
    "Row",
    "RowMapper",
    "ModelMapper",
    "SingleColumnRowMapper",
    "row_mapper_for",
    "model_plan",
    "normalize_name",
    "ModelKind",
    "ModelPlan",
    "PropertyPlan",
    "convert_value",
    "is_scalar_type",
    "register_scalar_type",
    "unregister_scalar_type",
]
