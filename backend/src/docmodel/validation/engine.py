"""Constraint validation engine.

Walks a model type's constraint map against an instance's field map and
collects every ConstraintError in one pass.
"""

import logging
from collections.abc import Mapping
from typing import Any

from docmodel.core.types import UNDEFINED, is_undefined_or_null
from docmodel.validation.constraints import (
    ConstraintRegistry,
    register_builtin_constraints,
)
from docmodel.validation.types import (
    ConstraintContext,
    ConstraintError,
    ModelDefinitionError,
)

logger = logging.getLogger(__name__)

ConstraintMap = Mapping[str, Mapping[str, Any]]


class ConstraintValidator:
    """Validates field maps against constraint maps.

    The validator is stateless apart from its constraint registry, so one
    instance can be shared by every model type that uses the same kinds.
    """

    def __init__(self, registry: ConstraintRegistry | None = None):
        if registry is None:
            registry = ConstraintRegistry()
            register_builtin_constraints(registry)
        self.registry = registry

    def collect_errors(
        self,
        type_name: str,
        constraints: ConstraintMap | None,
        fields: Mapping[str, Any],
    ) -> list[ConstraintError]:
        """Run every declared constraint and report undeclared fields.

        Errors are ordered by constraint-map declaration order, followed by
        one "undefined in constraints" error per undeclared field.

        Args:
            type_name: Model type name, used for tracing and nested checks
            constraints: The type's constraint map
            fields: Current public fields of the instance

        Returns:
            List of ConstraintErrors; empty when the fields are valid

        Raises:
            ModelDefinitionError: If constraints are missing or malformed
            ModelValidationError: If a nested model fails its own validation
        """
        if not isinstance(constraints, Mapping):
            raise ModelDefinitionError("Constraints not defined")

        undeclared = dict(fields)
        errors: list[ConstraintError] = []

        for property_name, field_constraints in constraints.items():
            undeclared.pop(property_name, None)
            value = fields.get(property_name, UNDEFINED)

            for kind, constraint in field_constraints.items():
                if is_undefined_or_null(constraint):
                    continue
                check = self.registry.get(kind)
                error = check(
                    ConstraintContext(
                        type_name=type_name,
                        property=property_name,
                        kind=kind,
                        constraint=constraint,
                        value=value,
                    )
                )
                if error is not None:
                    errors.append(error)

        for property_name in undeclared:
            errors.append(
                ConstraintError(
                    property=property_name,
                    kind="undefined",
                    value=None,
                    message="undefined in constraints",
                )
            )

        if errors:
            logger.debug("%s failed %d constraint(s)", type_name, len(errors))
        return errors


_default_validator: ConstraintValidator | None = None


def default_validator() -> ConstraintValidator:
    """Shared validator with only the built-in constraint kinds."""
    global _default_validator
    if _default_validator is None:
        _default_validator = ConstraintValidator()
    return _default_validator
