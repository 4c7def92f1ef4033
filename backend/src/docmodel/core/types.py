"""Runtime type classification for model field values.

Maps any value to a semantic type tag and exposes one predicate per tag:

    classify({})            # "object"
    is_number(float("nan")) # False, it's "nan"
    is_regexp(re.compile("abc"))
    is_blank("")            # True

Python has a single null (``None``). ``UNDEFINED`` stands in for an explicitly
unset value so that "null" and "undefined" stay distinguishable.
"""

import math
import re
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class _Undefined:
    """Singleton marker for an unset value."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()


class TypeTag(str, Enum):
    """Semantic type tags returned by classify()."""

    NULL = "null"
    UNDEFINED = "undefined"
    ELEMENT = "element"
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    FUNCTION = "function"
    REGEXP = "regexp"
    DATE = "date"
    NAN = "nan"
    INFINITY = "infinity"


@runtime_checkable
class Validatable(Protocol):
    """Anything that can validate itself and project to plain JSON."""

    def validate(self) -> bool:
        ...

    def to_json(self, fields: Any = None) -> dict[str, Any]:
        ...


def classify(value: Any) -> str:
    """Return the semantic type tag of a value."""
    if value is None:
        return TypeTag.NULL.value
    if value is UNDEFINED:
        return TypeTag.UNDEFINED.value

    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return TypeTag.BOOLEAN.value
    if isinstance(value, (int, float, Decimal)):
        if _is_nan(value):
            return TypeTag.NAN.value
        if _is_infinite(value):
            return TypeTag.INFINITY.value
        return TypeTag.NUMBER.value
    if isinstance(value, str):
        return TypeTag.STRING.value
    if isinstance(value, (list, tuple)):
        return TypeTag.ARRAY.value
    if isinstance(value, re.Pattern):
        return TypeTag.REGEXP.value
    if isinstance(value, (datetime, date)):
        return TypeTag.DATE.value
    if callable(value):
        return TypeTag.FUNCTION.value
    return TypeTag.OBJECT.value


def _is_nan(value: int | float | Decimal) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def _is_infinite(value: int | float | Decimal) -> bool:
    if isinstance(value, Decimal):
        return value.is_infinite()
    return isinstance(value, float) and math.isinf(value)


# =============================================================================
# Predicates
# =============================================================================


def is_undefined(value: Any) -> bool:
    return classify(value) == TypeTag.UNDEFINED


def is_null(value: Any) -> bool:
    return classify(value) == TypeTag.NULL


def is_object(value: Any) -> bool:
    return classify(value) == TypeTag.OBJECT


def is_array(value: Any) -> bool:
    return classify(value) == TypeTag.ARRAY


def is_string(value: Any) -> bool:
    return classify(value) == TypeTag.STRING


def is_number(value: Any) -> bool:
    return classify(value) == TypeTag.NUMBER


def is_boolean(value: Any) -> bool:
    return classify(value) == TypeTag.BOOLEAN


def is_function(value: Any) -> bool:
    return classify(value) == TypeTag.FUNCTION


def is_regexp(value: Any) -> bool:
    return classify(value) == TypeTag.REGEXP


def is_element(value: Any) -> bool:
    return classify(value) == TypeTag.ELEMENT


def is_date(value: Any) -> bool:
    return classify(value) == TypeTag.DATE


def is_nan(value: Any) -> bool:
    return classify(value) == TypeTag.NAN


def is_infinite(value: Any) -> bool:
    return classify(value) == TypeTag.INFINITY


def is_undefined_or_null(value: Any) -> bool:
    return is_null(value) or is_undefined(value)


def is_blank(value: Any) -> bool:
    """True only for zero-length strings."""
    return is_string(value) and len(value) == 0


# Keyed by lowercased type name, as written in constraint maps
_PREDICATES: dict[str, Callable[[Any], bool]] = {
    "undefined": is_undefined,
    "null": is_null,
    "object": is_object,
    "array": is_array,
    "string": is_string,
    "number": is_number,
    "boolean": is_boolean,
    "function": is_function,
    "regexp": is_regexp,
    "element": is_element,
    "date": is_date,
    "nan": is_nan,
    "infinite": is_infinite,
    "infinity": is_infinite,
    "undefinedornull": is_undefined_or_null,
    "blank": is_blank,
}


def predicate_for(type_name: str) -> Callable[[Any], bool] | None:
    """Look up the predicate for a type name, ignoring case.

    Returns None for names that have no predicate.
    """
    if not isinstance(type_name, str):
        return None
    return _PREDICATES.get(type_name.lower())


def primitive_type_names() -> list[str]:
    """List the type names accepted by predicate_for()."""
    return sorted(_PREDICATES.keys())


def is_model_type(candidate: Any) -> bool:
    """True if candidate is a model class (declares a model_name and validates)."""
    return (
        isinstance(candidate, type)
        and issubclass(candidate, Validatable)
        and isinstance(getattr(candidate, "model_name", None), str)
    )


def model_type_name(value: Any) -> str | None:
    """Recover the type name of a model instance.

    Prefers the instance's own type tag, then the declared name of its class.
    """
    tag = getattr(value, "_type_name", None)
    if isinstance(tag, str):
        return tag
    if is_model_type(type(value)):
        return type(value).model_name
    return None
