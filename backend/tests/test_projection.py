"""Tests for JSON projection and reconstruction from storage."""

import json

import pytest

from docmodel.core.types import UNDEFINED
from docmodel.models import I18NText, ModelBase, STORAGE_ID_FIELD
from docmodel.validation.types import ModelValidationError


# =============================================================================
# Test Models
# =============================================================================


class Address(ModelBase):
    constraints = {
        "street": {"type": "string", "required": True, "blank": False},
        "country": {"type": "string", "choice": ["CA", "US"]},
    }


class Person(ModelBase):
    constraints = {
        "name": {"type": "string", "required": True},
        "address": {"type": Address},
        "title": {"type": I18NText},
        "aliases": {"type": "array"},
        "previousAddresses": {"type": "array"},
        "extra": {"type": "object"},
        "grid": {"type": "array"},
    }


@pytest.fixture
def stored_person() -> dict:
    """A person as it would come back from the document store."""
    return {
        "_id": "p-1",
        "name": "Joe",
        "address": {"street": "1 Main St", "country": "CA"},
        "title": {"english": "Doctor", "french": "Docteur"},
        "aliases": ["Joey", "J"],
        "previousAddresses": [{"street": "9 Elm St"}],
    }


# =============================================================================
# Reconstruction
# =============================================================================


class TestFromStorage:
    def test_nested_models_rebuilt(self, stored_person):
        person = Person(stored_person, from_storage=True)
        assert isinstance(person.address, Address)
        assert isinstance(person.title, I18NText)
        assert person.address.street == "1 Main St"
        assert person.title.french == "Docteur"

    def test_untyped_sequences_copied(self, stored_person):
        person = Person(stored_person, from_storage=True)
        assert person.previousAddresses == [{"street": "9 Elm St"}]

    def test_null_nested_value_kept(self):
        person = Person({"name": "Joe", "address": None}, from_storage=True)
        assert person.address is None

    def test_existing_model_instance_kept(self):
        address = Address({"street": "1 Main St"})
        person = Person({"name": "Joe", "address": address}, from_storage=True)
        assert person.address is address

    def test_nested_failure_raised_during_assignment(self):
        with pytest.raises(ModelValidationError) as exc_info:
            Person({"name": "Joe", "address": {"street": ""}}, from_storage=True)
        assert exc_info.value.message == "Address constraint error=[street: blank]"

    def test_nested_validation_skipped_with_flag(self):
        person = Person(
            {"name": "Joe", "address": {"street": ""}},
            from_storage=True,
            validate=False,
        )
        assert isinstance(person.address, Address)
        with pytest.raises(ModelValidationError, match="Address constraint error"):
            person.validate()

    def test_without_storage_flag_dicts_stay_plain(self):
        with pytest.raises(ModelValidationError) as exc_info:
            Person({"name": "Joe", "address": {"street": "1 Main St"}})
        assert exc_info.value.message == "Person constraint error=[address: not of type Address]"


# =============================================================================
# to_json()
# =============================================================================


class TestToJson:
    def test_nested_projection(self, stored_person):
        person = Person(stored_person, from_storage=True)
        assert person.to_json() == {
            "_id": "p-1",
            "name": "Joe",
            "address": {"street": "1 Main St", "country": "CA"},
            "title": {"english": "Doctor", "french": "Docteur"},
            "aliases": ["Joey", "J"],
            "previousAddresses": [{"street": "9 Elm St"}],
        }

    def test_projection_is_json_serializable(self, stored_person):
        person = Person(stored_person, from_storage=True)
        assert json.loads(json.dumps(person.to_json())) == person.to_json()

    def test_internal_fields_excluded(self):
        person = Person({"name": "Joe", "_rev": 2})
        data = person.to_json()
        assert data == {"name": "Joe"}
        assert "_type_name" not in data
        assert "_errors" not in data

    def test_storage_id_included(self):
        person = Person({STORAGE_ID_FIELD: "abc", "name": "Joe"})
        assert person.to_json()[STORAGE_ID_FIELD] == "abc"

    def test_functions_omitted(self):
        person = Person({"name": "Joe", "greet": lambda: "hi"})
        assert person.to_json() == {"name": "Joe"}

    def test_undefined_values_omitted(self):
        person = Person({"name": "Joe", "aliases": UNDEFINED})
        assert person.to_json() == {"name": "Joe"}

    def test_sequences_of_models(self):
        person = Person({
            "name": "Joe",
            "previousAddresses": [
                Address({"street": "9 Elm St"}),
                UNDEFINED,
                None,
                "unknown",
            ],
        })
        assert person.to_json()["previousAddresses"] == [
            {"street": "9 Elm St"},
            None,
            "unknown",
        ]

    def test_tuples_projected_as_lists(self):
        person = Person({"name": "Joe", "aliases": ("Joey",)})
        assert person.to_json()["aliases"] == ["Joey"]

    def test_field_subset_without_storage_id(self):
        person = Person({"name": "Joe", "aliases": ["Joey"]})
        assert person.to_json(["name"]) == {"name": "Joe"}

    def test_models_inside_mappings(self):
        person = Person({
            "name": "Joe",
            "extra": {"home": Address({"street": "Main"}), "note": "x", "gone": UNDEFINED},
        })
        data = person.to_json()
        assert data["extra"] == {"home": {"street": "Main"}, "note": "x"}
        assert json.loads(json.dumps(data)) == data

    def test_models_inside_nested_sequences(self):
        person = Person({
            "name": "Joe",
            "grid": [
                [Address({"street": "Main"}), UNDEFINED],
                ({"cell": Address({"street": "Elm"})},),
            ],
        })
        data = person.to_json()
        assert data["grid"] == [[{"street": "Main"}], [{"cell": {"street": "Elm"}}]]
        assert json.loads(json.dumps(data)) == data

    def test_field_subset(self, stored_person):
        person = Person(stored_person, from_storage=True)
        assert person.to_json(["name", "title", "missing"]) == {
            "_id": "p-1",
            "name": "Joe",
            "title": {"english": "Doctor", "french": "Docteur"},
        }


# =============================================================================
# Round Trip
# =============================================================================


class TestRoundTrip:
    def test_round_trip_equivalent(self, stored_person):
        person = Person(stored_person, from_storage=True)
        copy = Person(person.to_json(), from_storage=True)
        assert copy == person
        assert copy.to_json() == person.to_json()

    def test_round_trip_same_validation_outcome(self):
        person = Person({"name": "Joe", "nickname": "Joey"}, validate=False)
        copy = Person(person.to_json(), from_storage=True, validate=False)

        with pytest.raises(ModelValidationError) as original:
            person.validate()
        with pytest.raises(ModelValidationError) as rebuilt:
            copy.validate()
        assert original.value.message == rebuilt.value.message
