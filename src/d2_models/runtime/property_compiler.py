"""
Property compiler - turns schema properties into accessors and constraints.

For every SchemaPropertySpec the compiler produces:
- the key the property is exposed under (collection name for to-many relations)
- a PropertyDescriptor whose get/set read and write the receiver's
  ``data_values`` backing store
- a ValidationConstraint with the type resolved through the TypeRegistry

Accessors are plain functions taking the receiver as their first argument, so
one descriptor serves every instance of a definition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple

from d2_models.runtime.type_registry import TypeHandler, TypeRegistry
from d2_models.specs.schema import SchemaPropertySpec
from d2_models.strings import pluralize

logger = logging.getLogger(__name__)

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


# =============================================================================
# Compiled records
# =============================================================================


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    Accessor pair bound to one backing-store key.

    ``set`` is None for properties that cannot be assigned.
    """

    key: str
    get: Getter
    set: Setter | None = None

    @property
    def writable(self) -> bool:
        return self.set is not None


@dataclass(frozen=True)
class ValidationConstraint:
    """Validation rules for one property."""

    type: str
    required: bool = False
    persisted: bool = False
    owner: bool = True
    max: int | float | None = None
    min: int | float | None = None
    unique: bool = False
    nullable: bool = True


class CompiledProperty(NamedTuple):
    key: str
    descriptor: PropertyDescriptor
    validation: ValidationConstraint
    handler: TypeHandler


# =============================================================================
# Accessor synthesis
# =============================================================================


def _make_getter(key: str) -> Getter:
    def getter(receiver: Any) -> Any:
        return receiver.data_values.get(key)

    getter.__name__ = f"get_{key}"
    return getter


def _make_setter(key: str) -> Setter:
    def setter(receiver: Any, value: Any) -> None:
        receiver.data_values[key] = value

    setter.__name__ = f"set_{key}"
    return setter


def property_key(schema_property: SchemaPropertySpec) -> str:
    """
    Return the key a schema property is exposed under.

    To-many relations use the schema's collection name, falling back to the
    pluralized property name. Everything else keeps its name.
    """
    if schema_property.collection:
        return schema_property.collection_name or pluralize(schema_property.name)
    return schema_property.name


# =============================================================================
# Compiler
# =============================================================================


class PropertyCompiler:
    """Compiles schema properties against a TypeRegistry."""

    def __init__(self, type_registry: TypeRegistry):
        self.type_registry = type_registry

    def compile(self, schema_property: SchemaPropertySpec) -> CompiledProperty:
        """
        Compile one schema property.

        Raises:
            SchemaTypeNotFoundError: If the property type is not registered
        """
        handler = self.type_registry.resolve(schema_property.property_type)
        key = property_key(schema_property)

        descriptor = PropertyDescriptor(
            key=key,
            get=_make_getter(key),
            set=_make_setter(key) if schema_property.writable else None,
        )
        validation = ValidationConstraint(
            type=handler.name,
            required=schema_property.required,
            persisted=schema_property.persisted,
            owner=schema_property.owner,
            max=schema_property.max,
            min=schema_property.min,
            unique=schema_property.unique,
            nullable=schema_property.nullable,
        )

        logger.debug(
            "Compiled property %s as %s (type=%s, writable=%s)",
            schema_property.name,
            key,
            handler.name,
            descriptor.writable,
        )
        return CompiledProperty(key, descriptor, validation, handler)
