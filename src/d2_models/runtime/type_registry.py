"""
Type registry - maps schema property types to value handlers.

Every schema property is resolved through a TypeRegistry during compilation.
Registries are plain objects passed to the compiler; ``default_type_registry()``
builds a fresh one for the value types the remote api publishes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from d2_models.errors import D2ModelError, SchemaTypeNotFoundError

logger = logging.getLogger(__name__)


def _identity(value: Any) -> Any:
    return value


def _none() -> Any:
    return None


def _equals(a: Any, b: Any) -> bool:
    return bool(a == b)


# =============================================================================
# Handlers
# =============================================================================


@dataclass(frozen=True)
class TypeHandler:
    """
    Value semantics for one schema value type.

    Attributes:
        name: Semantic type name reported in validations (TEXT, DATE, ...)
        python_types: Accepted Python types (empty tuple accepts anything)
        coerce: Converts a decoded api value into the stored value
        default: Factory for the empty value of this type
        equals: Comparison used for change tracking
    """

    name: str
    python_types: tuple[type, ...] = ()
    coerce: Callable[[Any], Any] = _identity
    default: Callable[[], Any] = _none
    equals: Callable[[Any, Any], bool] = _equals

    def is_valid(self, value: Any) -> bool:
        """Check whether a stored value fits this type. None always fits."""
        if value is None or not self.python_types:
            return True
        if isinstance(value, bool) and bool not in self.python_types:
            return False
        return isinstance(value, self.python_types)

    def is_empty(self, value: Any) -> bool:
        """A value counts as missing when it is None or the type's empty value."""
        if value is None:
            return True
        empty = self.default()
        return empty is not None and self.equals(value, empty)


def _coerce_boolean(value: Any) -> Any:
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def _coerce_integer(value: Any) -> Any:
    if isinstance(value, str) and value.lstrip("-").isdigit():
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _coerce_number(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _coerce_collection(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, tuple):
        return list(value)
    return value


def _equals_collection(a: Any, b: Any) -> bool:
    # Same items with the same multiplicity, in any order. Items may be
    # unhashable reference dicts.
    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return False
        remaining = list(b)
        for item in a:
            try:
                remaining.remove(item)
            except ValueError:
                return False
        return True
    return bool(a == b)


# =============================================================================
# Registry
# =============================================================================


@dataclass
class TypeRegistry:
    """
    Registry of TypeHandlers keyed by schema type identifier.

    A handler can be registered under several identifiers (e.g. both
    ``TEXT`` and ``java.lang.String``).
    """

    _handlers: dict[str, TypeHandler] = field(default_factory=dict)

    def register(self, handler: TypeHandler, *aliases: str) -> None:
        """
        Register a handler under its own name and any aliases.

        Raises:
            D2ModelError: If an identifier is already registered
        """
        for identifier in (handler.name, *aliases):
            if identifier in self._handlers:
                raise D2ModelError(f"Type {identifier!r} is already registered")
            self._handlers[identifier] = handler
        logger.debug("Registered type handler %s (aliases: %s)", handler.name, aliases)

    def resolve(self, type_identifier: str) -> TypeHandler:
        """
        Look up the handler for a schema type identifier.

        Raises:
            SchemaTypeNotFoundError: If nothing is registered for the identifier
        """
        handler = self._handlers.get(type_identifier)
        if handler is None:
            raise SchemaTypeNotFoundError(type_identifier)
        return handler

    def identifiers(self) -> list[str]:
        """Return every registered identifier, sorted."""
        return sorted(self._handlers)

    def __contains__(self, type_identifier: object) -> bool:
        return type_identifier in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self.identifiers())

    def __len__(self) -> int:
        return len(self._handlers)


def default_type_registry() -> TypeRegistry:
    """
    Build a registry with the value types published by the remote schemas.

    Returns a new registry on every call.
    """
    registry = TypeRegistry()
    text = (str,)

    registry.register(TypeHandler("TEXT", text, default=str), "java.lang.String")
    registry.register(TypeHandler("IDENTIFIER", text))
    registry.register(TypeHandler("EMAIL", text))
    registry.register(TypeHandler("PASSWORD", text))
    registry.register(TypeHandler("URL", text))
    registry.register(TypeHandler("PHONENUMBER", text))
    registry.register(TypeHandler("COLOR", text))
    registry.register(TypeHandler("GEOLOCATION", text))
    registry.register(TypeHandler("CONSTANT", text))
    registry.register(
        TypeHandler("DATE", (str, date, datetime)), "java.util.Date"
    )
    registry.register(
        TypeHandler("BOOLEAN", (bool,), coerce=_coerce_boolean),
        "java.lang.Boolean",
        "boolean",
    )
    registry.register(
        TypeHandler("INTEGER", (int,), coerce=_coerce_integer),
        "java.lang.Integer",
        "int",
    )
    registry.register(
        TypeHandler("NUMBER", (int, float), coerce=_coerce_number),
        "java.lang.Double",
        "double",
    )
    registry.register(
        TypeHandler(
            "COLLECTION",
            (list,),
            coerce=_coerce_collection,
            default=list,
            equals=_equals_collection,
        )
    )
    registry.register(TypeHandler("REFERENCE", (dict, str)))
    registry.register(TypeHandler("COMPLEX"))

    return registry
