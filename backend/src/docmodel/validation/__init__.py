"""docmodel validation engine.

Usage:
    from docmodel.validation import ConstraintRegistry, ConstraintValidator
    from docmodel.validation import register_builtin_constraints

    registry = ConstraintRegistry()
    register_builtin_constraints(registry)
    registry.register("pattern", check_pattern)
    validator = ConstraintValidator(registry)
"""

from docmodel.validation.constraints import (
    ConstraintRegistry,
    check_blank,
    check_choice,
    check_max_length,
    check_min_length,
    check_required,
    check_type,
    loose_equals,
    register_builtin_constraints,
)
from docmodel.validation.engine import (
    ConstraintMap,
    ConstraintValidator,
    default_validator,
)
from docmodel.validation.types import (
    ConstraintCheck,
    ConstraintContext,
    ConstraintError,
    ModelDefinitionError,
    ModelValidationError,
    format_constraint_errors,
)

__all__ = [
    # Types
    "ConstraintCheck",
    "ConstraintContext",
    "ConstraintError",
    "ModelDefinitionError",
    "ModelValidationError",
    "format_constraint_errors",
    # Checks
    "ConstraintRegistry",
    "check_blank",
    "check_choice",
    "check_max_length",
    "check_min_length",
    "check_required",
    "check_type",
    "loose_equals",
    "register_builtin_constraints",
    # Engine
    "ConstraintMap",
    "ConstraintValidator",
    "default_validator",
]
