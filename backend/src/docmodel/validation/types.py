"""Core types for the docmodel validation engine.

- ConstraintError: one failed field constraint
- ConstraintContext: everything a constraint check needs to decide
- ModelDefinitionError: a programming mistake in a model declaration
- ModelValidationError: every constraint failure found in one validation pass
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from docmodel.core.types import UNDEFINED


@dataclass(frozen=True)
class ConstraintError:
    """A single failed constraint.

    Attributes:
        property: Field name the constraint is declared on
        kind: Constraint kind ("type", "required", ...) or "undefined" for
            fields missing from the constraint map
        value: The constraint's declared value
        message: Short human-readable reason ("required", "not of type string")
    """

    property: str
    kind: str
    value: Any
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "property": self.property,
            "kind": self.kind,
            "value": _describe(self.value),
            "message": self.message,
        }

    def __str__(self) -> str:
        return (
            f"ConstraintError={{property={self.property}, kind={self.kind}, "
            f"value={_describe(self.value)}, message={self.message}}}"
        )


def _describe(value: Any) -> Any:
    """Make a constraint value JSON-safe (model types become their name)."""
    model_name = getattr(value, "model_name", None)
    if isinstance(value, type) and isinstance(model_name, str):
        return model_name
    if isinstance(value, tuple):
        return list(value)
    if value is UNDEFINED:
        return None
    return value


@dataclass(frozen=True)
class ConstraintContext:
    """Context passed to a constraint check.

    Attributes:
        type_name: Name of the model type being validated
        property: Field the constraint is declared on
        kind: Constraint kind being checked
        constraint: Declared constraint value
        value: Current field value (UNDEFINED when the field is unset)
    """

    type_name: str
    property: str
    kind: str
    constraint: Any
    value: Any = UNDEFINED

    def error(self, message: str) -> ConstraintError:
        """Build a ConstraintError for this context."""
        return ConstraintError(
            property=self.property,
            kind=self.kind,
            value=self.constraint,
            message=message,
        )


class ConstraintCheck(Protocol):
    """Protocol that every constraint check implements.

    Returns None when the constraint holds. Raises ModelDefinitionError for
    malformed constraint values.
    """

    def __call__(self, ctx: ConstraintContext) -> ConstraintError | None:
        ...


class ModelDefinitionError(Exception):
    """Raised for mistakes in a model declaration.

    Missing constraint maps, unsupported constraint kinds, and malformed
    constraint values are programming errors; they are never aggregated.
    """


class ModelValidationError(Exception):
    """Raised when a model instance violates one or more constraints.

    Attributes:
        type_name: Model type that failed
        errors: Every ConstraintError found, in constraint-map order
        message: "<TypeName> constraint error[s]=[field: message, ...]"
    """

    def __init__(self, type_name: str, errors: Sequence[ConstraintError]):
        self.type_name = type_name
        self.errors = tuple(errors)
        self.message = format_constraint_errors(type_name, self.errors)
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": False,
            "model": self.type_name,
            "message": self.message,
            "errors": [e.to_dict() for e in self.errors],
        }


def format_constraint_errors(
    type_name: str, errors: Sequence[ConstraintError]
) -> str:
    """Format errors as ``Person constraint errors=[name: required, ...]``."""
    suffix = "s" if len(errors) > 1 else ""
    details = ", ".join(f"{e.property}: {e.message}" for e in errors)
    return f"{type_name} constraint error{suffix}=[{details}]"
