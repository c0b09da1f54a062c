"""
Argument guards used at public call boundaries.
"""

from __future__ import annotations

from typing import Any

from d2_models.errors import ArgumentMissingError, TypeMismatchError


def check_defined(value: Any, name: str = "Value") -> Any:
    """
    Ensure a required argument was provided.

    Raises:
        ArgumentMissingError: "<name> should be provided" when value is None
    """
    if value is None:
        raise ArgumentMissingError(f"{name} should be provided")
    return value


def check_type(value: Any, expected_type: type | tuple[type, ...], type_name: str) -> Any:
    """
    Ensure an argument has the expected Python type.

    Raises:
        TypeMismatchError: naming the expected and the actual type
    """
    if not isinstance(value, expected_type):
        raise TypeMismatchError(value, type_name)
    return value


def check_string(value: Any, name: str = "Value") -> str:
    """Ensure a required, non-empty string argument was provided."""
    check_defined(value, name)
    check_type(value, str, "string")
    if not value:
        raise ArgumentMissingError(f"{name} should be provided")
    return value
