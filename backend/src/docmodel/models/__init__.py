"""Document models: the ModelBase class, built-in models and the registry."""

from docmodel.models.base import (
    STORAGE_ID_FIELD,
    ModelBase,
    freeze_constraints,
    project_value,
)
from docmodel.models.i18n import I18NText
from docmodel.models.registry import ModelRegistry, create_default_registry

__all__ = [
    "STORAGE_ID_FIELD",
    "I18NText",
    "ModelBase",
    "ModelRegistry",
    "create_default_registry",
    "freeze_constraints",
    "project_value",
]
