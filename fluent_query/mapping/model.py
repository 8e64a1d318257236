"""Row-to-model mapper.

Supports dataclasses, Pydantic models, and plain classes. Columns are
matched to properties ignoring case and underscores, so ``BIRTH_DATE``,
``birth_date`` and ``birthDate`` all land on ``birth_date``. Columns with no
matching property are ignored unless the mapper is strict.
"""

from __future__ import annotations

import dataclasses
import inspect
import types
import typing
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from fluent_query.core.exceptions import ColumnMismatchError, StrictModeViolation
from fluent_query.mapping.plan import ModelKind, ModelPlan, PropertyPlan
from fluent_query.mapping.scalar import convert_value, is_scalar_type

T = TypeVar("T")


def normalize_name(name: str) -> str:
    """Reduce a column or attribute name to its matching key."""
    return name.replace("_", "").replace(" ", "").lower()


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError):
        # Unresolvable forward references: keep the raw annotations.
        return dict(getattr(obj, "__annotations__", {}))


def _scalar_target(annotation: Any) -> Any:
    """Return the scalar type a property converts to, or None."""
    if annotation is None:
        return None
    if is_scalar_type(annotation):
        return annotation
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1 and is_scalar_type(args[0]):
            return args[0]
    return None


def _pydantic_properties(cls: type[BaseModel]) -> list[PropertyPlan]:
    return [
        PropertyPlan(
            attribute=name,
            key=info.alias or name,
            in_init=True,
            required=info.is_required(),
        )
        for name, info in cls.model_fields.items()
    ]


def _dataclass_properties(cls: type) -> list[PropertyPlan]:
    hints = _type_hints(cls)
    plans = []
    for f in dataclasses.fields(cls):
        has_default = (
            f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        )
        plans.append(
            PropertyPlan(
                attribute=f.name,
                key=f.name,
                in_init=f.init,
                required=f.init and not has_default,
                scalar_type=_scalar_target(hints.get(f.name)),
            )
        )
    return plans


def _plain_properties(cls: type) -> list[PropertyPlan]:
    hints = _type_hints(cls)
    plans: dict[str, PropertyPlan] = {}
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
    except (ValueError, TypeError):
        sig = None
    if sig is not None:
        init_hints = _type_hints(cls.__init__)  # type: ignore[misc]
        for name, param in sig.parameters.items():
            if name == "self" or param.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
                inspect.Parameter.POSITIONAL_ONLY,
            ):
                continue
            annotation = init_hints.get(name, hints.get(name))
            plans[name] = PropertyPlan(
                attribute=name,
                key=name,
                in_init=True,
                required=param.default is inspect.Parameter.empty,
                scalar_type=_scalar_target(annotation),
            )
    # Annotated class attributes are set after construction
    for name, annotation in hints.items():
        if name in plans or name.startswith("_"):
            continue
        if typing.get_origin(annotation) is typing.ClassVar:
            continue
        plans[name] = PropertyPlan(
            attribute=name,
            key=name,
            in_init=False,
            required=False,
            scalar_type=_scalar_target(annotation),
        )
    return list(plans.values())


@lru_cache(maxsize=512)
def model_plan(target_class: type) -> ModelPlan:
    """Compile (once per class) the property plan for *target_class*."""
    if issubclass(target_class, BaseModel):
        kind = ModelKind.PYDANTIC
        properties = _pydantic_properties(target_class)
    elif dataclasses.is_dataclass(target_class):
        kind = ModelKind.DATACLASS
        properties = _dataclass_properties(target_class)
    else:
        kind = ModelKind.PLAIN
        properties = _plain_properties(target_class)

    by_name: dict[str, PropertyPlan] = {}
    for prop in properties:
        by_name.setdefault(normalize_name(prop.attribute), prop)
        if prop.key != prop.attribute:
            by_name.setdefault(normalize_name(prop.key), prop)
    return ModelPlan(target_class=target_class, kind=kind, properties=by_name)


class ModelMapper(Generic[T]):
    """Simple row-to-model mapper.

    Detection order:
    1. Pydantic BaseModel -> model_validate(values)
    2. dataclass -> target_class(**init_values), then remaining fields set
    3. Plain class -> target_class(**init_values), then annotated attributes
       and attributes created by the constructor set

    For dataclasses and plain classes, values of properties annotated with a
    scalar type (``int``, ``date``, ``Decimal`` ...) are converted to it;
    Pydantic does its own validation.

    A non-empty row none of whose columns match a property raises
    ColumnMismatchError.

    Args:
        target_class: The class to construct from row data.
        aliases: Optional column-name to field-name mapping.
        strict: Raise StrictModeViolation for columns without a property.
    """

    def __init__(
        self,
        target_class: type[T],
        aliases: dict[str, str] | None = None,
        strict: bool = False,
    ) -> None:
        self._target_class = target_class
        self._aliases = aliases
        self._strict = strict
        self._plan = model_plan(target_class)

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    def _apply_aliases(self, row: dict[str, Any]) -> dict[str, Any]:
        """Apply column aliases to the row."""
        if not self._aliases:
            return row
        result = {}
        for key, value in row.items():
            mapped_key = self._aliases.get(key, key)
            result[mapped_key] = value
        return result

    def map_one(self, row: dict[str, Any]) -> T:
        """Map a single row to target_class instance."""
        row = self._apply_aliases(row)
        plan = self._plan
        name = self._target_class.__name__

        init_values: dict[str, Any] = {}
        late_values: dict[str, Any] = {}
        unmapped: list[str] = []
        for column, value in row.items():
            prop = plan.properties.get(normalize_name(column))
            if prop is None:
                unmapped.append(column)
                continue
            if plan.kind is not ModelKind.PYDANTIC and prop.scalar_type is not None:
                value = convert_value(value, prop.scalar_type)
            if prop.in_init:
                init_values[prop.key] = value
            else:
                late_values[prop.attribute] = value

        if plan.kind is ModelKind.PYDANTIC:
            self._check_unmapped(row, unmapped)
            try:
                return self._target_class.model_validate(init_values)  # type: ignore[attr-defined, no-any-return]
            except ValidationError as e:
                raise ColumnMismatchError(name, [str(e)]) from e

        missing = [p.attribute for p in plan.required if p.key not in init_values]
        if missing:
            raise ColumnMismatchError(name, missing)

        try:
            instance = self._target_class(**init_values)
        except TypeError as e:
            raise ColumnMismatchError(name, [str(e)]) from e

        if plan.kind is ModelKind.PLAIN and unmapped:
            unmapped = self._set_instance_attributes(instance, row, unmapped, late_values)
        self._check_unmapped(row, unmapped)

        for attribute, value in late_values.items():
            if plan.kind is ModelKind.DATACLASS:
                # Also works for frozen dataclasses
                object.__setattr__(instance, attribute, value)
            else:
                setattr(instance, attribute, value)
        return instance

    def _set_instance_attributes(
        self,
        instance: Any,
        row: dict[str, Any],
        unmapped: list[str],
        late_values: dict[str, Any],
    ) -> list[str]:
        """Match leftover columns to attributes the constructor created.

        Matched values are added to *late_values*; the still unmapped
        columns are returned.
        """
        attributes = {
            normalize_name(attr): attr
            for attr in getattr(instance, "__dict__", {})
            if not attr.startswith("_")
        }
        remaining = []
        for column in unmapped:
            attribute = attributes.get(normalize_name(column))
            if attribute is None:
                remaining.append(column)
            else:
                late_values[attribute] = row[column]
        return remaining

    def _check_unmapped(self, row: dict[str, Any], unmapped: list[str]) -> None:
        name = self._target_class.__name__
        if self._strict and unmapped:
            raise StrictModeViolation(f"Columns {unmapped} have no matching property on {name}")
        if row and len(unmapped) == len(row):
            raise ColumnMismatchError(
                name, [], f"no property matches any of the columns {unmapped}"
            )

    def map_many(self, rows: list[dict[str, Any]]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]
