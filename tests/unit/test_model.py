"""Tests for Model instances."""

import copy
from typing import Any

import pytest

from d2_models.errors import ReadOnlyPropertyError
from d2_models.runtime.model_definition import ModelDefinition


@pytest.fixture
def definition(data_element_schema: dict[str, Any]) -> ModelDefinition:
    return ModelDefinition.create_from_schema(data_element_schema)


class TestAttributeAccess:
    def test_assignment_goes_through_the_setter(self, definition: ModelDefinition) -> None:
        model = definition.create()

        model.name = "ANC 1st visit"

        assert model.data_values == {"name": "ANC 1st visit"}
        assert model.name == "ANC 1st visit"

    def test_collection_is_exposed_under_its_plural(self, definition: ModelDefinition) -> None:
        model = definition.create()

        model.dataElementGroups = [{"id": "qfxEYY9xAl6"}]

        assert model.data_values["dataElementGroups"] == [{"id": "qfxEYY9xAl6"}]
        with pytest.raises(AttributeError):
            model.dataElementGroup = []

    def test_read_only_property_rejects_assignment(self, definition: ModelDefinition) -> None:
        model = definition.create({"displayName": "ANC 1st visit"})

        with pytest.raises(ReadOnlyPropertyError, match="displayName"):
            model.displayName = "Other"

        assert model.displayName == "ANC 1st visit"

    def test_read_only_error_is_an_attribute_error(self, definition: ModelDefinition) -> None:
        model = definition.create()

        with pytest.raises(AttributeError):
            model.dimensionType = "DISAGGREGATION"

    def test_unknown_attribute_raises(self, definition: ModelDefinition) -> None:
        model = definition.create()

        with pytest.raises(AttributeError, match="noSuchProperty"):
            model.noSuchProperty

        with pytest.raises(AttributeError):
            model.noSuchProperty = 1

    def test_repr_names_the_model(self, definition: ModelDefinition) -> None:
        model = definition.create({"id": "fbfJHSPpUQD"})

        assert repr(model) == "Model('dataElement', id='fbfJHSPpUQD')"


class TestCopy:
    def test_copy_shares_values(self, definition: ModelDefinition) -> None:
        model = definition.create({"name": "ANC", "dataElementGroups": [{"id": "qfxEYY9xAl6"}]})

        duplicate = copy.copy(model)

        assert duplicate is not model
        assert duplicate.model_definition is definition
        assert duplicate.name == "ANC"
        assert duplicate.data_values is model.data_values

    def test_deepcopy_keeps_the_definition(self, definition: ModelDefinition) -> None:
        model = definition.create({"name": "ANC", "dataElementGroups": [{"id": "qfxEYY9xAl6"}]})
        model.name = "ANC 1st visit"

        duplicate = copy.deepcopy(model)
        duplicate.dataElementGroups.append({"id": "h9cuJOkOzzi"})

        assert duplicate.model_definition is definition
        assert duplicate.dirty is True
        assert duplicate.name == "ANC 1st visit"
        assert model.dataElementGroups == [{"id": "qfxEYY9xAl6"}]


class TestDirtyTracking:
    def test_new_model_is_clean(self, definition: ModelDefinition) -> None:
        assert definition.create().dirty is False

    def test_changing_a_value_marks_dirty(self, definition: ModelDefinition) -> None:
        model = definition.create({"name": "ANC"})

        model.name = "ANC 1st visit"

        assert model.dirty is True

    def test_assigning_the_same_value_stays_clean(self, definition: ModelDefinition) -> None:
        model = definition.create({"name": "ANC"})

        model.name = "ANC"

        assert model.dirty is False

    def test_reordered_collection_stays_clean(self, definition: ModelDefinition) -> None:
        model = definition.create({"dataSets": ["a", "b"]})

        model.dataSets = ["b", "a"]

        assert model.dirty is False

    def test_changed_duplicates_mark_dirty(self, definition: ModelDefinition) -> None:
        model = definition.create({"dataSets": ["a", "a", "b"]})

        model.dataSets = ["a", "b", "b"]

        assert model.dirty is True


class TestPopulate:
    def test_coerces_known_keys(self, definition: ModelDefinition) -> None:
        model = definition.create()

        model.populate(
            {"zeroIsSignificant": "true", "dataElementGroups": None, "name": "ANC"}
        )

        assert model.zeroIsSignificant is True
        assert model.dataElementGroups == []
        assert model.name == "ANC"

    def test_keeps_unknown_keys_verbatim(self, definition: ModelDefinition) -> None:
        model = definition.create({"translations": [{"locale": "fr"}]})

        assert model.data_values["translations"] == [{"locale": "fr"}]

    def test_populate_does_not_mark_dirty(self, definition: ModelDefinition) -> None:
        model = definition.create()

        model.populate({"name": "ANC"})

        assert model.dirty is False


class TestToPayload:
    def test_only_persisted_owned_fields(self, definition: ModelDefinition) -> None:
        model = definition.create(
            {
                "id": "fbfJHSPpUQD",
                "name": "ANC 1st visit",
                "displayName": "ANC 1st visit",
                "externalAccess": False,
                "dataElementGroups": [{"id": "qfxEYY9xAl6"}],
                "translations": [],
            }
        )

        assert model.to_payload() == {"id": "fbfJHSPpUQD", "name": "ANC 1st visit"}


class TestValidate:
    @pytest.fixture
    def valid_data(self) -> dict[str, Any]:
        return {
            "id": "fbfJHSPpUQD",
            "name": "ANC 1st visit",
            "shortName": "ANC 1st visit",
            "categoryCombo": {"id": "bjDvmb4bfuf"},
            "domainType": "AGGREGATE",
            "valueType": "NUMBER",
            "zeroIsSignificant": False,
        }

    def test_valid_model(self, definition: ModelDefinition, valid_data: dict[str, Any]) -> None:
        model = definition.create(valid_data)

        assert model.validate() == {}
        assert model.is_valid()

    def test_missing_required_fields(self, definition: ModelDefinition) -> None:
        errors = definition.create().validate()

        assert errors["name"] == ["name is required"]
        assert errors["shortName"] == ["shortName is required"]
        assert "code" not in errors

    def test_empty_text_counts_as_missing(
        self, definition: ModelDefinition, valid_data: dict[str, Any]
    ) -> None:
        model = definition.create({**valid_data, "name": ""})

        assert model.validate() == {"name": ["name is required"]}

    def test_text_longer_than_max(
        self, definition: ModelDefinition, valid_data: dict[str, Any]
    ) -> None:
        model = definition.create({**valid_data, "shortName": "x" * 51})

        assert model.validate() == {"shortName": ["shortName length should be at most 50"]}

    def test_text_shorter_than_min(
        self, definition: ModelDefinition, valid_data: dict[str, Any]
    ) -> None:
        model = definition.create({**valid_data, "id": "short"})

        assert model.validate() == {"id": ["id length should be at least 11"]}

    def test_wrong_value_type(self, definition: ModelDefinition, valid_data: dict[str, Any]) -> None:
        model = definition.create({**valid_data, "zeroIsSignificant": "maybe"})

        assert model.validate() == {
            "zeroIsSignificant": ["zeroIsSignificant should be of type BOOLEAN"]
        }
        assert not model.is_valid()
