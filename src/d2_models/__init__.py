"""
d2-models - compile remote schemas into model definitions.

This package provides:
- SchemaSpec: typed view of the schema metadata the remote api publishes
- ModelDefinition: compiled accessors, validations and CRUD entry points
- Model: instances reading and writing through the compiled accessors
- HttpApi: httpx-based remote api the definitions call through
"""

__version__ = "0.3.0"

from d2_models.config import ApiConfig
from d2_models.errors import (
    ArgumentMissingError,
    D2ModelError,
    ReadOnlyPropertyError,
    RemoteOperationError,
    SchemaError,
    SchemaTypeNotFoundError,
    TypeMismatchError,
)
from d2_models.runtime import (
    HttpApi,
    Model,
    ModelDefinition,
    ModelDefinitions,
    RemoteApi,
    TypeRegistry,
    create_from_schema,
    default_type_registry,
    load_model_definitions,
)
from d2_models.specs import SchemaPropertySpec, SchemaSpec

__all__ = [
    "ApiConfig",
    "ArgumentMissingError",
    "D2ModelError",
    "HttpApi",
    "Model",
    "ModelDefinition",
    "ModelDefinitions",
    "ReadOnlyPropertyError",
    "RemoteApi",
    "RemoteOperationError",
    "SchemaError",
    "SchemaPropertySpec",
    "SchemaSpec",
    "SchemaTypeNotFoundError",
    "TypeMismatchError",
    "TypeRegistry",
    "create_from_schema",
    "default_type_registry",
    "load_model_definitions",
]
