"""docmodel: runtime type checking and constraint validation for document models.

Usage:
    from docmodel import ModelBase, ModelValidationError

    class Person(ModelBase):
        constraints = {
            "name": {"type": "string", "required": True, "minLength": 2},
            "gender": {"type": "string", "choice": ["M", "F"]},
        }

    try:
        Person({"name": "J", "gender": "A"})
    except ModelValidationError as e:
        print(e.message)  # Person constraint errors=[name: minLength, gender: not in list [M,F]]
"""

from docmodel.core.types import UNDEFINED, classify
from docmodel.models import (
    STORAGE_ID_FIELD,
    I18NText,
    ModelBase,
    ModelRegistry,
    create_default_registry,
)
from docmodel.validation import (
    ConstraintError,
    ConstraintRegistry,
    ConstraintValidator,
    ModelDefinitionError,
    ModelValidationError,
    register_builtin_constraints,
)

__all__ = [
    "UNDEFINED",
    "classify",
    "STORAGE_ID_FIELD",
    "I18NText",
    "ModelBase",
    "ModelRegistry",
    "create_default_registry",
    "ConstraintError",
    "ConstraintRegistry",
    "ConstraintValidator",
    "ModelDefinitionError",
    "ModelValidationError",
    "register_builtin_constraints",
]
