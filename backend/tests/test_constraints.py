"""Tests for the constraint checks, their registry and the validation engine."""

import pytest

from docmodel.core.types import UNDEFINED
from docmodel.models import ModelBase, ModelRegistry
from docmodel.validation import (
    ConstraintContext,
    ConstraintError,
    ConstraintRegistry,
    ConstraintValidator,
    ModelDefinitionError,
    ModelValidationError,
    check_blank,
    check_choice,
    check_max_length,
    check_min_length,
    check_required,
    check_type,
    format_constraint_errors,
    loose_equals,
    register_builtin_constraints,
)


def make_ctx(kind: str, constraint, value=UNDEFINED, prop: str = "field") -> ConstraintContext:
    """Helper to create a ConstraintContext for testing."""
    return ConstraintContext(
        type_name="TestModel",
        property=prop,
        kind=kind,
        constraint=constraint,
        value=value,
    )


# =============================================================================
# type
# =============================================================================


class TestTypeCheck:
    def test_absent_values_pass(self):
        assert check_type(make_ctx("type", "string")) is None
        assert check_type(make_ctx("type", "string", None)) is None

    def test_matching_primitive(self):
        assert check_type(make_ctx("type", "number", 3.5)) is None
        assert check_type(make_ctx("type", "Number", 3)) is None

    def test_mismatched_primitive(self):
        error = check_type(make_ctx("type", "number", "3"))
        assert error == ConstraintError("field", "type", "number", "not of type number")

    def test_unknown_type_name(self):
        error = check_type(make_ctx("type", "widget", "x"))
        assert error.message == "not of type widget"

    def test_array_elements_are_not_inspected(self):
        class Item(ModelBase):
            constraints = {"sku": {"required": True}}

        broken = Item({}, validate=False)
        assert check_type(make_ctx("type", "array", [broken])) is None


# =============================================================================
# required / blank
# =============================================================================


class TestRequiredAndBlank:
    @pytest.mark.parametrize("value", [UNDEFINED, None])
    def test_required_missing(self, value):
        assert check_required(make_ctx("required", True, value)).message == "required"

    @pytest.mark.parametrize("value", ["", 0, False, []])
    def test_required_present(self, value):
        assert check_required(make_ctx("required", True, value)) is None

    def test_not_required(self):
        assert check_required(make_ctx("required", False)) is None

    def test_blank_disallowed(self):
        assert check_blank(make_ctx("blank", False, "")).message == "blank"

    def test_blank_allowed(self):
        assert check_blank(make_ctx("blank", True, "")) is None

    @pytest.mark.parametrize("value", [" ", [], None, UNDEFINED, 0])
    def test_only_empty_strings_are_blank(self, value):
        assert check_blank(make_ctx("blank", False, value)) is None


# =============================================================================
# choice
# =============================================================================


class TestChoiceCheck:
    def test_value_in_list(self):
        assert check_choice(make_ctx("choice", ("M", "F"), "F")) is None

    def test_value_not_in_list(self):
        error = check_choice(make_ctx("choice", ("M", "F"), "A"))
        assert error.message == "not in list [M,F]"

    def test_absent_value_passes(self):
        assert check_choice(make_ctx("choice", ("M", "F"))) is None

    def test_loose_numeric_match(self):
        assert check_choice(make_ctx("choice", (1, 2, 3), "2")) is None
        assert check_choice(make_ctx("choice", ("1", "2"), 1)) is None

    def test_empty_string_matches_zero(self):
        assert check_choice(make_ctx("choice", (0, 1), "")) is None
        assert check_choice(make_ctx("choice", ("M", "F"), "")).message == "not in list [M,F]"

    def test_message_renders_json_literals(self):
        error = check_choice(make_ctx("choice", (True, None, 1.0, 2.5), "x"))
        assert error.message == "not in list [true,,1,2.5]"

    @pytest.mark.parametrize("constraint", ["MF", (), [], {"M": 1}, 5])
    def test_malformed_choice(self, constraint):
        with pytest.raises(ModelDefinitionError, match="Invalid choice"):
            check_choice(make_ctx("choice", constraint, "M"))


class TestLooseEquals:
    @pytest.mark.parametrize(
        "left,right",
        [("M", "M"), (1, "1"), ("1.0", 1), (True, 1), (0, False), (" 7 ", 7), ("", 0), ("  ", 0)],
    )
    def test_equal(self, left, right):
        assert loose_equals(left, right)

    @pytest.mark.parametrize(
        "left,right",
        [("M", "F"), ("M", 1), ("", "M"), (None, 0), ("abc", []), ("nan", float("nan"))],
    )
    def test_not_equal(self, left, right):
        assert not loose_equals(left, right)


# =============================================================================
# minLength / maxLength
# =============================================================================


class TestLengthChecks:
    def test_string_lengths(self):
        assert check_min_length(make_ctx("minLength", 5, "Joe")).message == "minLength"
        assert check_min_length(make_ctx("minLength", 3, "Joe")) is None
        assert check_max_length(make_ctx("maxLength", 2, "Joe")).message == "maxLength"
        assert check_max_length(make_ctx("maxLength", 3, "Joe")) is None

    def test_sequence_lengths(self):
        assert check_min_length(make_ctx("minLength", 1, [])).message == "minLength"
        assert check_max_length(make_ctx("maxLength", 1, ["a", "b"])).message == "maxLength"

    def test_values_without_length_are_skipped(self):
        assert check_min_length(make_ctx("minLength", 5, 12)) is None
        assert check_max_length(make_ctx("maxLength", 1, None)) is None
        assert check_max_length(make_ctx("maxLength", 1)) is None

    def test_mappings_are_skipped(self):
        assert check_min_length(make_ctx("minLength", 5, {"a": 1})) is None
        assert check_max_length(make_ctx("maxLength", 0, {"a": 1})) is None

    @pytest.mark.parametrize("bound", ["5", 2.5, True])
    def test_invalid_bound(self, bound):
        with pytest.raises(ModelDefinitionError, match="Invalid minLength"):
            check_min_length(make_ctx("minLength", bound, "Joe"))


# =============================================================================
# Registry
# =============================================================================


class TestConstraintRegistry:
    def test_builtins(self):
        registry = ConstraintRegistry()
        register_builtin_constraints(registry)
        assert registry.list_registered() == [
            "blank", "choice", "maxLength", "minLength", "required", "type",
        ]

    def test_unsupported_kind(self):
        with pytest.raises(ModelDefinitionError, match="Unsupported constraint: pattern"):
            ConstraintRegistry().get("pattern")

    def test_register_is_idempotent(self):
        registry = ConstraintRegistry()
        registry.register("required", check_required)
        registry.register("required", check_blank)
        assert registry.get("required") is check_required

    def test_clear(self):
        registry = ConstraintRegistry()
        register_builtin_constraints(registry)
        registry.clear()
        assert not registry.is_registered("type")


# =============================================================================
# Engine
# =============================================================================


def check_uppercase(ctx: ConstraintContext) -> ConstraintError | None:
    if isinstance(ctx.value, str) and ctx.constraint and ctx.value != ctx.value.upper():
        return ctx.error("not uppercase")
    return None


@pytest.fixture
def custom_validator():
    registry = ConstraintRegistry()
    register_builtin_constraints(registry)
    registry.register("uppercase", check_uppercase)
    return ConstraintValidator(registry)


class TestConstraintValidator:
    def test_missing_constraints(self):
        with pytest.raises(ModelDefinitionError, match="Constraints not defined"):
            ConstraintValidator().collect_errors("TestModel", None, {})

    def test_collects_all_errors(self):
        errors = ConstraintValidator().collect_errors(
            "TestModel",
            {"name": {"required": True}, "code": {"type": "string"}},
            {"code": 7, "other": True},
        )
        assert [(e.property, e.message) for e in errors] == [
            ("name", "required"),
            ("code", "not of type string"),
            ("other", "undefined in constraints"),
        ]

    def test_valid_fields(self):
        errors = ConstraintValidator().collect_errors(
            "TestModel", {"name": {"required": True}}, {"name": "Joe"}
        )
        assert errors == []

    def test_custom_kind(self, custom_validator):
        errors = custom_validator.collect_errors(
            "TestModel", {"code": {"uppercase": True}}, {"code": "abc"}
        )
        assert errors == [ConstraintError("code", "uppercase", True, "not uppercase")]

    def test_custom_kind_unknown_to_default_validator(self):
        with pytest.raises(ModelDefinitionError, match="Unsupported constraint: uppercase"):
            ConstraintValidator().collect_errors(
                "TestModel", {"code": {"uppercase": True}}, {"code": "abc"}
            )

    def test_model_with_custom_validator(self, custom_validator):
        registry = ModelRegistry()
        Product = registry.declare_subtype(
            "Product",
            {"code": {"type": "string", "uppercase": True}},
            validator=custom_validator,
        )
        assert Product({"code": "ABC"}).validate() is True
        with pytest.raises(ModelValidationError, match=r"Product constraint error=\[code: not uppercase\]"):
            Product({"code": "abc"})


# =============================================================================
# Errors
# =============================================================================


class TestErrorTypes:
    def test_format_single(self):
        errors = [ConstraintError("name", "required", True, "required")]
        assert format_constraint_errors("Person", errors) == "Person constraint error=[name: required]"

    def test_format_many(self):
        errors = [
            ConstraintError("name", "required", True, "required"),
            ConstraintError("gender", "required", True, "required"),
        ]
        assert format_constraint_errors("Person", errors) == (
            "Person constraint errors=[name: required, gender: required]"
        )

    def test_validation_error_carries_structure(self):
        errors = [ConstraintError("gender", "choice", ("M", "F"), "not in list [M,F]")]
        exc = ModelValidationError("Person", errors)
        assert str(exc) == "Person constraint error=[gender: not in list [M,F]]"
        assert exc.errors == tuple(errors)
        assert exc.to_dict() == {
            "valid": False,
            "model": "Person",
            "message": "Person constraint error=[gender: not in list [M,F]]",
            "errors": [
                {
                    "property": "gender",
                    "kind": "choice",
                    "value": ["M", "F"],
                    "message": "not in list [M,F]",
                }
            ],
        }

    def test_constraint_error_str(self):
        error = ConstraintError("name", "required", True, "required")
        assert str(error) == (
            "ConstraintError={property=name, kind=required, value=True, message=required}"
        )

    def test_model_type_value_described_by_name(self):
        class Address(ModelBase):
            constraints = {"street": {"type": "string"}}

        error = ConstraintError("address", "type", Address, "not of type Address")
        assert error.to_dict()["value"] == "Address"
