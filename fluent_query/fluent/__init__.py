"""Fluent statement builders."""

from fluent_query.fluent.binding import Bindable, ParameterBinder
from fluent_query.fluent.query import QueryBuilder
from fluent_query.fluent.template import FluentTemplate
from fluent_query.fluent.update import UpdateBuilder

__all__ = [
    "Bindable",
    "FluentTemplate",
    "ParameterBinder",
    "QueryBuilder",
    "UpdateBuilder",
]
