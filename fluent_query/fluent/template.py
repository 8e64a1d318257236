"""Template that hands out fluent statement builders."""

from __future__ import annotations

from fluent_query.core.template import NamedParameterTemplate
from fluent_query.fluent.query import QueryBuilder
from fluent_query.fluent.update import UpdateBuilder


class FluentTemplate(NamedParameterTemplate):
    """NamedParameterTemplate with ``query`` / ``update`` entry points.

    Each call returns a new, independent builder bound to this template.

    Example:
        template = FluentTemplate.from_config(ConnectionConfig(driver="sqlite", database="app.db"))
        names = template.query("SELECT name FROM users ORDER BY id").fetch(str)
    """

    def query(self, sql: str) -> QueryBuilder:
        return QueryBuilder(sql, self)

    def update(self, sql: str) -> UpdateBuilder:
        return UpdateBuilder(sql, self)
