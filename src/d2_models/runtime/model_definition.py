"""
Model definitions - compiled, immutable descriptions of remote model types.

A ModelDefinition is compiled from a remote schema once and never changes
afterwards. It exposes:
- identity: ``name``, ``is_metadata``, ``api_endpoint``
- ``model_properties``: read-only mapping of key -> PropertyDescriptor
- ``model_validations``: read-only mapping of key -> ValidationConstraint
- CRUD entry points: ``create``, ``get``, ``list``, ``save``, ``delete``

The remote api is injected; definitions never reach for a global client.
"""

from __future__ import annotations

import logging
from collections.abc import Coroutine, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from d2_models.checks import check_defined, check_string
from d2_models.errors import D2ModelError, RemoteOperationError, SchemaError
from d2_models.runtime.api import RemoteApi
from d2_models.runtime.model import Model
from d2_models.runtime.property_compiler import (
    PropertyCompiler,
    PropertyDescriptor,
    ValidationConstraint,
)
from d2_models.runtime.type_registry import (
    TypeHandler,
    TypeRegistry,
    default_type_registry,
)
from d2_models.specs.schema import SchemaSpec
from d2_models.strings import to_api_endpoint

logger = logging.getLogger(__name__)

ALL_FIELDS = ":all"

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class ModelDefinition:
    """
    Compiled description of a model type.

    Construct directly with a name for an empty definition, or compile one
    from a remote schema with ``ModelDefinition.create_from_schema``.

    Every attribute is fixed at construction; assignment raises
    AttributeError.
    """

    __slots__ = (
        "_name",
        "_is_metadata",
        "_api_endpoint",
        "_model_properties",
        "_model_validations",
        "_type_handlers",
        "_api",
    )

    def __init__(
        self,
        name: str | None = None,
        *,
        is_metadata: bool = False,
        api_endpoint: str | None = None,
        model_properties: Mapping[str, PropertyDescriptor] | None = None,
        model_validations: Mapping[str, ValidationConstraint] | None = None,
        type_handlers: Mapping[str, TypeHandler] | None = None,
        api: RemoteApi | None = None,
    ):
        check_string(name)
        _check_same_keys(name, model_properties, model_validations, type_handlers)

        set_field = object.__setattr__
        set_field(self, "_name", name)
        set_field(self, "_is_metadata", bool(is_metadata))
        set_field(self, "_api_endpoint", api_endpoint)
        set_field(self, "_model_properties", _freeze(model_properties))
        set_field(self, "_model_validations", _freeze(model_validations))
        set_field(self, "_type_handlers", _freeze(type_handlers))
        set_field(self, "_api", api)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"ModelDefinition is immutable, cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"ModelDefinition is immutable, cannot delete {name!r}")

    # Definitions are immutable, so copies share the original
    def __copy__(self) -> ModelDefinition:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> ModelDefinition:
        return self

    def __repr__(self) -> str:
        return (
            f"ModelDefinition({self._name!r}, is_metadata={self._is_metadata}, "
            f"api_endpoint={self._api_endpoint!r}, properties={len(self._model_properties)})"
        )

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_metadata(self) -> bool:
        return self._is_metadata

    @property
    def api_endpoint(self) -> str | None:
        return self._api_endpoint

    @property
    def model_properties(self) -> Mapping[str, PropertyDescriptor]:
        return self._model_properties

    @property
    def model_validations(self) -> Mapping[str, ValidationConstraint]:
        return self._model_validations

    @property
    def type_handlers(self) -> Mapping[str, TypeHandler]:
        return self._type_handlers

    @property
    def api(self) -> RemoteApi | None:
        return self._api

    # -------------------------------------------------------------------------
    # Compilation
    # -------------------------------------------------------------------------

    @classmethod
    def create_from_schema(
        cls,
        schema: SchemaSpec | Mapping[str, Any] | None = None,
        *,
        type_registry: TypeRegistry | None = None,
        api: RemoteApi | None = None,
    ) -> ModelDefinition:
        """
        Compile a ModelDefinition from a remote schema.

        Args:
            schema: Schema payload (mapping) or SchemaSpec
            type_registry: Registry used to resolve property types
                (defaults to a fresh ``default_type_registry()``)
            api: Remote api used by ``get``, ``list``, ``save`` and ``delete``

        Raises:
            ArgumentMissingError: If no schema is given
            SchemaError: If the schema is malformed or two properties share a key
            SchemaTypeNotFoundError: If a property type is not registered
        """
        check_defined(schema, "Schema")
        spec = SchemaSpec.from_payload(schema)
        if type_registry is None:
            type_registry = default_type_registry()
        compiler = PropertyCompiler(type_registry)

        properties: dict[str, PropertyDescriptor] = {}
        validations: dict[str, ValidationConstraint] = {}
        handlers: dict[str, TypeHandler] = {}

        for schema_property in spec.properties:
            compiled = compiler.compile(schema_property)
            if compiled.key in properties:
                raise SchemaError(
                    f"Schema {spec.name!r} declares property {compiled.key!r} more than once"
                )
            properties[compiled.key] = compiled.descriptor
            validations[compiled.key] = compiled.validation
            handlers[compiled.key] = compiled.handler

        logger.debug(
            "Compiled model definition %s with %d properties", spec.name, len(properties)
        )
        return cls(
            spec.name,
            is_metadata=spec.metadata,
            api_endpoint=to_api_endpoint(spec.plural),
            model_properties=properties,
            model_validations=validations,
            type_handlers=handlers,
            api=api,
        )

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def create(self, data: Mapping[str, Any] | None = None) -> Model:
        """Return a new model instance, populated from ``data`` when given."""
        model = Model(self)
        if data:
            model.populate(data)
        return model

    def get(self, identifier: str | None = None) -> Coroutine[Any, Any, Model]:
        """
        Fetch one model by identifier.

        Arguments are checked when ``get`` is called; the request is made when
        the returned coroutine is awaited. Remote errors propagate unchanged.

        Raises:
            ArgumentMissingError: If no identifier is given
        """
        check_defined(identifier, "Identifier")
        api, endpoint = self._remote()
        return self._fetch_one(api, f"{endpoint}/{identifier}")

    def list(self, **query: Any) -> Coroutine[Any, Any, list[Model]]:
        """
        Fetch the model collection.

        Keyword arguments are passed to the api as query options next to
        ``fields=:all``.
        """
        api, endpoint = self._remote()
        options = {"fields": ALL_FIELDS, **query}
        return self._fetch_list(api, endpoint, options)

    def save(self, model: Model | None = None) -> Coroutine[Any, Any, Model]:
        """
        Store a model remotely.

        Models without an ``id`` are created (POST), others are updated (PUT).
        """
        check_defined(model, "Model")
        api, endpoint = self._remote()
        return self._store(api, endpoint, model)

    def delete(self, model: Model | None = None) -> Coroutine[Any, Any, None]:
        """
        Delete a model remotely.

        Raises:
            ArgumentMissingError: If no model is given or it has no ``id``
        """
        check_defined(model, "Model")
        identifier = check_defined(model.data_values.get("id"), "Identifier")
        api, endpoint = self._remote()
        return self._remove(api, f"{endpoint}/{identifier}")

    def _remote(self) -> tuple[RemoteApi, str]:
        api = check_defined(self._api, "Api")
        if not self._api_endpoint:
            raise D2ModelError(f"Model definition {self._name!r} has no api endpoint")
        return api, self._api_endpoint

    async def _fetch_one(self, api: RemoteApi, path: str) -> Model:
        try:
            payload = await api.get(path, {"fields": ALL_FIELDS})
        except RemoteOperationError as e:
            logger.warning("Fetching %s failed: %s", path, e)
            raise
        return self.create().populate(payload or {})

    async def _fetch_list(
        self, api: RemoteApi, endpoint: str, options: dict[str, Any]
    ) -> list[Model]:
        try:
            payload = await api.get(endpoint, options)
        except RemoteOperationError as e:
            logger.warning("Listing %s failed: %s", endpoint, e)
            raise
        collection_key = endpoint.rsplit("/", 1)[-1]
        items = (payload or {}).get(collection_key, [])
        return [self.create().populate(item) for item in items]

    async def _store(self, api: RemoteApi, endpoint: str, model: Model) -> Model:
        data = model.to_payload()
        identifier = model.data_values.get("id")
        try:
            if identifier:
                await api.update(f"{endpoint}/{identifier}", data)
            else:
                response = await api.post(endpoint, data)
                created_id = _created_id(response)
                if created_id:
                    model.data_values["id"] = created_id
        except RemoteOperationError as e:
            logger.warning("Saving %s model failed: %s", self._name, e)
            raise
        model.dirty = False
        return model

    async def _remove(self, api: RemoteApi, path: str) -> None:
        try:
            await api.delete(path)
        except RemoteOperationError as e:
            logger.warning("Deleting %s failed: %s", path, e)
            raise


create_from_schema = ModelDefinition.create_from_schema


def _check_same_keys(name: str, *tables: Mapping[str, Any] | None) -> None:
    keys = [set(table or ()) for table in tables]
    if any(table_keys != keys[0] for table_keys in keys[1:]):
        raise D2ModelError(
            f"Model definition {name!r} needs properties, validations and type handlers "
            "for the same keys"
        )


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not mapping:
        return _EMPTY
    return MappingProxyType(dict(mapping))


def _created_id(response: Any) -> str | None:
    # POST responses carry the new uid either at the top level or in "response"
    if not isinstance(response, Mapping):
        return None
    nested = response.get("response")
    if isinstance(nested, Mapping) and nested.get("uid"):
        return str(nested["uid"])
    uid = response.get("uid") or response.get("id")
    return str(uid) if uid else None


# =============================================================================
# Collections of definitions
# =============================================================================


class ModelDefinitions(Mapping[str, ModelDefinition]):
    """
    Model definitions keyed by name.

    Supports item and attribute access:

        >>> definitions.dataElement is definitions["dataElement"]
        True
    """

    def __init__(self, definitions: Iterable[ModelDefinition] = ()):
        self._definitions: dict[str, ModelDefinition] = {}
        for definition in definitions:
            self.add(definition)

    def add(self, definition: ModelDefinition) -> None:
        """
        Add a definition.

        Raises:
            D2ModelError: If a definition with the same name exists
        """
        if definition.name in self._definitions:
            raise D2ModelError(f"Model definition {definition.name!r} already exists")
        self._definitions[definition.name] = definition

    @classmethod
    def from_schemas(
        cls,
        schemas: Iterable[SchemaSpec | Mapping[str, Any]],
        *,
        type_registry: TypeRegistry | None = None,
        api: RemoteApi | None = None,
    ) -> ModelDefinitions:
        """Compile every schema with one shared type registry."""
        registry = default_type_registry() if type_registry is None else type_registry
        return cls(
            ModelDefinition.create_from_schema(schema, type_registry=registry, api=api)
            for schema in schemas
        )

    def __getitem__(self, name: str) -> ModelDefinition:
        return self._definitions[name]

    def __getattr__(self, name: str) -> ModelDefinition:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._definitions[name]
        except KeyError:
            raise AttributeError(f"No model definition named {name!r}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)


async def load_model_definitions(
    api: RemoteApi,
    *,
    type_registry: TypeRegistry | None = None,
) -> ModelDefinitions:
    """
    Fetch ``/schemas`` and compile a definition for each schema.

    Every definition is bound to ``api``.
    """
    payload = await api.get("/schemas", {"fields": ALL_FIELDS})
    schemas = (payload or {}).get("schemas", [])
    definitions = ModelDefinitions.from_schemas(
        schemas, type_registry=type_registry, api=api
    )
    logger.info("Loaded %d model definitions", len(definitions))
    return definitions
