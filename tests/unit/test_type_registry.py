"""Tests for the type registry."""

from datetime import datetime

import pytest

from d2_models.errors import D2ModelError, SchemaTypeNotFoundError
from d2_models.runtime.type_registry import (
    TypeHandler,
    TypeRegistry,
    default_type_registry,
)


class TestTypeRegistry:
    def test_resolve_registered_type(self) -> None:
        registry = TypeRegistry()
        handler = TypeHandler("TEXT", (str,))
        registry.register(handler)

        assert registry.resolve("TEXT") is handler

    def test_resolve_alias(self) -> None:
        registry = TypeRegistry()
        handler = TypeHandler("TEXT", (str,))
        registry.register(handler, "java.lang.String")

        assert registry.resolve("java.lang.String") is handler
        assert "java.lang.String" in registry
        assert len(registry) == 2

    def test_unknown_type_names_the_identifier(self) -> None:
        registry = TypeRegistry()

        with pytest.raises(SchemaTypeNotFoundError, match="unknown.type"):
            registry.resolve("unknown.type")

    def test_duplicate_registration_is_rejected(self) -> None:
        registry = TypeRegistry()
        registry.register(TypeHandler("TEXT"))

        with pytest.raises(D2ModelError, match="already registered"):
            registry.register(TypeHandler("TEXT"))

    def test_identifiers_are_sorted(self) -> None:
        registry = TypeRegistry()
        registry.register(TypeHandler("TEXT"), "java.lang.String")
        registry.register(TypeHandler("DATE"))

        assert registry.identifiers() == ["DATE", "TEXT", "java.lang.String"]
        assert list(registry) == registry.identifiers()


class TestDefaultTypeRegistry:
    def test_returns_a_new_registry_each_time(self) -> None:
        assert default_type_registry() is not default_type_registry()

    @pytest.mark.parametrize(
        "identifier",
        [
            "TEXT",
            "IDENTIFIER",
            "DATE",
            "BOOLEAN",
            "INTEGER",
            "NUMBER",
            "EMAIL",
            "PASSWORD",
            "URL",
            "PHONENUMBER",
            "GEOLOCATION",
            "COLOR",
            "CONSTANT",
            "COLLECTION",
            "REFERENCE",
            "COMPLEX",
        ],
    )
    def test_knows_the_remote_value_types(self, identifier: str) -> None:
        assert default_type_registry().resolve(identifier).name == identifier

    def test_java_class_aliases(self) -> None:
        registry = default_type_registry()

        assert registry.resolve("java.lang.String").name == "TEXT"
        assert registry.resolve("java.util.Date").name == "DATE"
        assert registry.resolve("java.lang.Boolean").name == "BOOLEAN"


class TestTypeHandlers:
    @pytest.fixture
    def registry(self) -> TypeRegistry:
        return default_type_registry()

    def test_boolean_coercion(self, registry: TypeRegistry) -> None:
        boolean = registry.resolve("BOOLEAN")

        assert boolean.coerce("TRUE") is True
        assert boolean.coerce("false") is False
        assert boolean.coerce("yes") == "yes"

    def test_integer_coercion(self, registry: TypeRegistry) -> None:
        integer = registry.resolve("INTEGER")

        assert integer.coerce("-12") == -12
        assert integer.coerce(3.0) == 3
        assert integer.coerce(3.5) == 3.5

    def test_number_coercion(self, registry: TypeRegistry) -> None:
        number = registry.resolve("NUMBER")

        assert number.coerce("2.5") == 2.5
        assert number.coerce("n/a") == "n/a"

    def test_bool_is_not_a_number(self, registry: TypeRegistry) -> None:
        assert not registry.resolve("INTEGER").is_valid(True)
        assert not registry.resolve("NUMBER").is_valid(False)
        assert registry.resolve("NUMBER").is_valid(1)

    def test_date_accepts_strings_and_datetimes(self, registry: TypeRegistry) -> None:
        date_handler = registry.resolve("DATE")

        assert date_handler.is_valid("2013-03-11T16:53:49.000+0000")
        assert date_handler.is_valid(datetime(2013, 3, 11))
        assert not date_handler.is_valid(20130311)

    def test_none_is_always_valid(self, registry: TypeRegistry) -> None:
        assert registry.resolve("TEXT").is_valid(None)

    def test_empty_values(self, registry: TypeRegistry) -> None:
        assert registry.resolve("TEXT").is_empty("")
        assert registry.resolve("COLLECTION").is_empty([])
        assert not registry.resolve("BOOLEAN").is_empty(False)
        assert not registry.resolve("INTEGER").is_empty(0)

    def test_collection_equality_ignores_order(self, registry: TypeRegistry) -> None:
        collection = registry.resolve("COLLECTION")

        assert collection.equals(["a", "b"], ["b", "a"])
        assert not collection.equals(["a"], ["a", "b"])

    def test_collection_equality_counts_duplicates(self, registry: TypeRegistry) -> None:
        collection = registry.resolve("COLLECTION")

        assert not collection.equals(["a", "a", "b"], ["a", "b", "b"])
        assert collection.equals([{"id": "x"}, {"id": "y"}], [{"id": "y"}, {"id": "x"}])
