"""
Model instances backed by a compiled ModelDefinition.

A Model keeps its values in ``data_values``. Attribute access for the
definition's property keys is routed through the compiled descriptors.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from d2_models.errors import ReadOnlyPropertyError

if TYPE_CHECKING:
    from d2_models.runtime.model_definition import ModelDefinition

logger = logging.getLogger(__name__)


class Model:
    """
    One instance of a model type.

    Example:
        >>> data_element = definition.create()
        >>> data_element.name = "ANC 1st visit"
        >>> data_element.data_values
        {'name': 'ANC 1st visit'}
    """

    __slots__ = ("model_definition", "data_values", "dirty")

    def __init__(self, model_definition: ModelDefinition):
        object.__setattr__(self, "model_definition", model_definition)
        object.__setattr__(self, "data_values", {})
        object.__setattr__(self, "dirty", False)

    # -------------------------------------------------------------------------
    # Attribute routing
    # -------------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not set slots. copy and pickle look up
        # dunders before the slots are filled.
        if name.startswith("__") or name in Model.__slots__:
            raise AttributeError(name)
        descriptor = self.model_definition.model_properties.get(name)
        if descriptor is None:
            raise AttributeError(
                f"{self.model_definition.name!r} model has no property {name!r}"
            )
        return descriptor.get(self)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in Model.__slots__:
            object.__setattr__(self, name, value)
            return

        descriptor = self.model_definition.model_properties.get(name)
        if descriptor is None:
            raise AttributeError(
                f"{self.model_definition.name!r} model has no property {name!r}"
            )
        if descriptor.set is None:
            raise ReadOnlyPropertyError(name)

        handler = self.model_definition.type_handlers[name]
        previous = descriptor.get(self)
        descriptor.set(self, value)
        if not handler.equals(previous, value):
            object.__setattr__(self, "dirty", True)

    def __repr__(self) -> str:
        return f"Model({self.model_definition.name!r}, id={self.data_values.get('id')!r})"

    # -------------------------------------------------------------------------
    # Payload handling
    # -------------------------------------------------------------------------

    def populate(self, payload: Mapping[str, Any]) -> Model:
        """
        Load values from a decoded api payload.

        Known keys are coerced by their type handler, unknown keys are kept as
        they are. Populating does not mark the model dirty.
        """
        handlers = self.model_definition.type_handlers
        for key, value in payload.items():
            handler = handlers.get(key)
            self.data_values[key] = handler.coerce(value) if handler else value
        return self

    def to_payload(self) -> dict[str, Any]:
        """Return the persisted fields owned by this model's schema."""
        validations = self.model_definition.model_validations
        payload: dict[str, Any] = {}
        for key, value in self.data_values.items():
            validation = validations.get(key)
            if validation is None or not (validation.persisted and validation.owner):
                continue
            payload[key] = value
        return payload

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> dict[str, list[str]]:
        """
        Check the stored values against the definition's validations.

        Returns:
            Mapping of property key to error messages (empty when valid)
        """
        errors: dict[str, list[str]] = {}
        definition = self.model_definition

        for key, validation in definition.model_validations.items():
            handler = definition.type_handlers[key]
            value = self.data_values.get(key)
            messages: list[str] = []

            if handler.is_empty(value):
                if validation.required:
                    messages.append(f"{key} is required")
            elif not handler.is_valid(value):
                messages.append(f"{key} should be of type {validation.type}")
            else:
                messages.extend(_bound_errors(key, value, validation.min, validation.max))

            if messages:
                errors[key] = messages

        if errors:
            logger.debug("Model %s failed validation: %s", definition.name, errors)
        return errors

    def is_valid(self) -> bool:
        return not self.validate()


def _bound_errors(key: str, value: Any, low: Any, high: Any) -> list[str]:
    if isinstance(value, (str, list)):
        size, unit = len(value), "length"
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        size, unit = value, "value"
    else:
        return []

    messages = []
    if high is not None and size > high:
        messages.append(f"{key} {unit} should be at most {high:g}")
    if low is not None and size < low:
        messages.append(f"{key} {unit} should be at least {low:g}")
    return messages
