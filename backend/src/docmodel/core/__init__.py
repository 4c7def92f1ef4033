"""Core building blocks: runtime type classification and configuration."""

from docmodel.core.config import DocModelConfig
from docmodel.core.types import (
    UNDEFINED,
    TypeTag,
    Validatable,
    classify,
    is_array,
    is_blank,
    is_boolean,
    is_date,
    is_element,
    is_function,
    is_infinite,
    is_model_type,
    is_nan,
    is_null,
    is_number,
    is_object,
    is_regexp,
    is_string,
    is_undefined,
    is_undefined_or_null,
    model_type_name,
    predicate_for,
    primitive_type_names,
)

__all__ = [
    "DocModelConfig",
    "UNDEFINED",
    "TypeTag",
    "Validatable",
    "classify",
    "is_array",
    "is_blank",
    "is_boolean",
    "is_date",
    "is_element",
    "is_function",
    "is_infinite",
    "is_model_type",
    "is_nan",
    "is_null",
    "is_number",
    "is_object",
    "is_regexp",
    "is_string",
    "is_undefined",
    "is_undefined_or_null",
    "model_type_name",
    "predicate_for",
    "primitive_type_names",
]
