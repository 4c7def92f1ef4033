"""Built-in constraint checks and the registry that resolves them by kind.

Supported kinds:
- type: primitive type name ("string", "array", ...) or a model type
- required: value must be present
- blank: empty strings are rejected unless blank is true
- choice: value must loosely equal one entry of a list
- minLength/maxLength: bounds on len(value)

Applications can register additional kinds on their own registry.
"""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Any

from docmodel.core.types import (
    UNDEFINED,
    is_array,
    is_blank,
    is_model_type,
    is_undefined_or_null,
    model_type_name,
    predicate_for,
)
from docmodel.validation.types import (
    ConstraintCheck,
    ConstraintContext,
    ConstraintError,
    ModelDefinitionError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constraint Checks
# =============================================================================


def check_type(ctx: ConstraintContext) -> ConstraintError | None:
    """Check the field value against a primitive type name or a model type.

    Absent values pass; required-ness is its own constraint. A nested model
    that matches the expected type is validated in turn, and its
    ModelValidationError propagates to the caller unchanged.
    """
    value = ctx.value
    if is_undefined_or_null(value):
        return None

    logger.debug(
        "type check: model=%s property=%s constraint=%r value=%r",
        ctx.type_name,
        ctx.property,
        ctx.constraint,
        value,
    )

    if is_model_type(ctx.constraint):
        expected = ctx.constraint.model_name
        if model_type_name(value) != expected:
            return ctx.error(f"not of type {expected}")
        value.validate()
        return None

    predicate = predicate_for(ctx.constraint)
    if predicate is None or not predicate(value):
        return ctx.error(f"not of type {ctx.constraint}")
    return None


def check_required(ctx: ConstraintContext) -> ConstraintError | None:
    logger.debug(
        "required check: model=%s property=%s constraint=%r",
        ctx.type_name,
        ctx.property,
        ctx.constraint,
    )
    if ctx.constraint and is_undefined_or_null(ctx.value):
        return ctx.error("required")
    return None


def check_blank(ctx: ConstraintContext) -> ConstraintError | None:
    logger.debug(
        "blank check: model=%s property=%s constraint=%r",
        ctx.type_name,
        ctx.property,
        ctx.constraint,
    )
    if not ctx.constraint and is_blank(ctx.value):
        return ctx.error("blank")
    return None


def check_choice(ctx: ConstraintContext) -> ConstraintError | None:
    """Check the value against an ordered list of allowed literals.

    Raises:
        ModelDefinitionError: If the constraint is not a non-empty list
    """
    logger.debug(
        "choice check: model=%s property=%s constraint=%r",
        ctx.type_name,
        ctx.property,
        ctx.constraint,
    )
    choices = ctx.constraint
    if not is_array(choices) or len(choices) == 0:
        raise ModelDefinitionError(f"Invalid choice: {choices!r}")

    value = ctx.value
    if is_undefined_or_null(value):
        return None

    if any(loose_equals(choice, value) for choice in choices):
        return None
    listed = ",".join(_format_choice(choice) for choice in choices)
    return ctx.error(f"not in list [{listed}]")


def _format_choice(choice: Any) -> str:
    """Render a choice the way it reads in a JSON document."""
    if choice is None or choice is UNDEFINED:
        return ""
    if isinstance(choice, bool):
        return "true" if choice else "false"
    if isinstance(choice, float) and choice.is_integer():
        return str(int(choice))
    return str(choice)


def check_min_length(ctx: ConstraintContext) -> ConstraintError | None:
    length = _measure(ctx)
    if length is not None and length < ctx.constraint:
        return ctx.error("minLength")
    return None


def check_max_length(ctx: ConstraintContext) -> ConstraintError | None:
    length = _measure(ctx)
    if length is not None and length > ctx.constraint:
        return ctx.error("maxLength")
    return None


def _measure(ctx: ConstraintContext) -> int | None:
    """Length of a string or sequence value, or None for any other value."""
    bound = ctx.constraint
    if isinstance(bound, bool) or not isinstance(bound, int):
        raise ModelDefinitionError(f"Invalid {ctx.kind}: {bound!r}")

    value = ctx.value
    if not isinstance(value, (str, list, tuple)):
        return None
    return len(value)


def loose_equals(left: Any, right: Any) -> bool:
    """Equality that lets numeric strings and booleans match numbers.

    ``"1"`` equals ``1`` and ``True`` equals ``1``; ``"M"`` never equals ``1``.
    An empty or whitespace-only string counts as ``0``.
    """
    if left == right:
        return True
    left_num = _as_number(left)
    right_num = _as_number(right)
    if left_num is None or right_num is None:
        return False
    return left_num == right_num


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(Decimal(text))
        except InvalidOperation:
            return None
        return None if math.isnan(number) else number
    return None


# =============================================================================
# Constraint Registry
# =============================================================================


class ConstraintRegistry:
    """Registry of constraint checks keyed by constraint kind.

    Each ConstraintValidator owns one registry; create it at startup and
    pass it where it's needed.

    Example:
        registry = ConstraintRegistry()
        register_builtin_constraints(registry)
        registry.register("pattern", check_pattern)
    """

    def __init__(self) -> None:
        self._checks: dict[str, ConstraintCheck] = {}

    def register(self, kind: str, check: ConstraintCheck) -> None:
        """Register a check for a constraint kind.

        Idempotent - re-registering the same kind is a no-op.

        Args:
            kind: Constraint kind as written in constraint maps (e.g., "minLength")
            check: Callable taking a ConstraintContext
        """
        if kind in self._checks:
            return
        self._checks[kind] = check

    def get(self, kind: str) -> ConstraintCheck:
        """Get the check for a constraint kind.

        Raises:
            ModelDefinitionError: If the kind is not registered
        """
        if kind not in self._checks:
            raise ModelDefinitionError(f"Unsupported constraint: {kind}")
        return self._checks[kind]

    def is_registered(self, kind: str) -> bool:
        return kind in self._checks

    def list_registered(self) -> list[str]:
        return sorted(self._checks.keys())

    def clear(self) -> None:
        """Clear all registrations. Primarily for testing."""
        self._checks.clear()


def register_builtin_constraints(registry: ConstraintRegistry) -> None:
    """Register the built-in constraint kinds."""
    registry.register("type", check_type)
    registry.register("required", check_required)
    registry.register("blank", check_blank)
    registry.register("choice", check_choice)
    registry.register("minLength", check_min_length)
    registry.register("maxLength", check_max_length)
