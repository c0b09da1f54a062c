"""
Runtime for compiled model definitions.

- type_registry: schema type identifiers -> value handlers
- property_compiler: schema properties -> accessors and validations
- model_definition: compiled definitions and their CRUD entry points
- model: instances backed by a definition
- api: remote api capability and its HTTP implementation
"""

from d2_models.runtime.api import HttpApi, RemoteApi
from d2_models.runtime.model import Model
from d2_models.runtime.model_definition import (
    ModelDefinition,
    ModelDefinitions,
    create_from_schema,
    load_model_definitions,
)
from d2_models.runtime.property_compiler import (
    CompiledProperty,
    PropertyCompiler,
    PropertyDescriptor,
    ValidationConstraint,
    property_key,
)
from d2_models.runtime.type_registry import (
    TypeHandler,
    TypeRegistry,
    default_type_registry,
)

__all__ = [
    "CompiledProperty",
    "HttpApi",
    "Model",
    "ModelDefinition",
    "ModelDefinitions",
    "PropertyCompiler",
    "PropertyDescriptor",
    "RemoteApi",
    "TypeHandler",
    "TypeRegistry",
    "ValidationConstraint",
    "create_from_schema",
    "default_type_registry",
    "load_model_definitions",
    "property_key",
]
