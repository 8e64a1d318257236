"""Model mapping plan data classes.

Frozen dataclasses describing how the columns of a row land on the
properties of a target class. Plans are compiled once per class and reused
by ModelMapper for every row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ModelKind(Enum):
    PYDANTIC = "pydantic"
    DATACLASS = "dataclass"
    PLAIN = "plain"


@dataclass(frozen=True)
class PropertyPlan:
    """Mapping plan for a single property of the target class."""

    attribute: str
    key: str  # keyword used at construction (alias for Pydantic fields)
    in_init: bool
    required: bool
    scalar_type: Any = None  # conversion target, None when values pass through


@dataclass(frozen=True)
class ModelPlan:
    """Compiled mapping plan for a target class."""

    target_class: type
    kind: ModelKind
    properties: dict[str, PropertyPlan] = field(default_factory=dict)  # normalized name -> plan

    @property
    def required(self) -> list[PropertyPlan]:
        return list(dict.fromkeys(p for p in self.properties.values() if p.required))
