"""
Error types for schema compilation, model definitions and remote access.
"""

from typing import Any


class D2ModelError(Exception):
    """Base exception for all d2-models errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ArgumentMissingError(D2ModelError):
    """
    Raised when a required argument is omitted.

    Examples:
    - ModelDefinition() without a name
    - create_from_schema() without a schema
    - definition.get() without an identifier
    """

    pass


class TypeMismatchError(D2ModelError):
    """Raised when an argument is supplied with the wrong value type."""

    def __init__(self, value: Any, expected: str):
        self.value = value
        self.expected = expected
        self.actual = type(value).__name__
        super().__init__(
            f"Expected {value!r} to have type {expected}, got {self.actual}"
        )


class SchemaError(D2ModelError):
    """
    Raised when schema metadata is malformed.

    Examples:
    - Schema without a name
    - Property entry that is not an object
    - Property without a propertyType
    """

    pass


class SchemaTypeNotFoundError(SchemaError):
    """Raised when a schema property declares a type the registry does not know."""

    def __init__(self, type_identifier: str):
        self.type_identifier = type_identifier
        super().__init__(
            f'Type from schema "{type_identifier}" not found available type list.'
        )


class ReadOnlyPropertyError(D2ModelError, AttributeError):
    """Raised when assigning to a property that was compiled without a setter."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Property {key!r} is read-only")


class RemoteOperationError(D2ModelError):
    """
    Raised by the remote api when a request fails.

    ``data`` is the payload the server returned, unchanged.
    """

    def __init__(self, data: Any, status_code: int | None = None):
        self.data = data
        self.status_code = status_code
        super().__init__(_payload_message(data))


def _payload_message(data: Any) -> str:
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(data)
