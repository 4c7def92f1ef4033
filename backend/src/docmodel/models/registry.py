"""Model registry.

Maps type names to model classes. A registry is created at application
startup and passed to whatever needs to look models up by name (the YAML
loader, the API, the CLI); nothing is registered globally.
"""

import logging
from collections.abc import Mapping
from typing import Any

from docmodel.core.types import is_model_type, predicate_for
from docmodel.models.base import ModelBase
from docmodel.validation.engine import ConstraintValidator
from docmodel.validation.types import ModelDefinitionError

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Registry of declared model types.

    Example:
        registry = create_default_registry()
        Address = registry.declare_subtype("Address", {
            "street": {"type": "string", "required": True},
        })
        Person = registry.declare_subtype("Person", {
            "address": {"type": "Address"},
        })
        person = registry.create("Person", document, from_storage=True)
    """

    def __init__(self) -> None:
        self._models: dict[str, type[ModelBase]] = {}

    def register(self, model_cls: type[ModelBase]) -> type[ModelBase]:
        """Register a model class under its declared model_name.

        Idempotent for the same class; a different class under a taken name
        is rejected.

        Raises:
            ModelDefinitionError: If the name is already bound to another class
        """
        if not is_model_type(model_cls):
            raise ModelDefinitionError(f"Not a model type: {model_cls!r}")

        name = model_cls.model_name
        existing = self._models.get(name)
        if existing is model_cls:
            return model_cls
        if existing is not None:
            raise ModelDefinitionError(f"Model '{name}' is already registered")

        self._models[name] = model_cls
        logger.debug("Registered model %s", name)
        return model_cls

    def declare_subtype(
        self,
        name: str,
        constraints: Mapping[str, Mapping[str, Any]],
        base: type[ModelBase] = ModelBase,
        validator: ConstraintValidator | None = None,
    ) -> type[ModelBase]:
        """Declare and register a new model type.

        String ``type`` constraints that name a registered model are
        resolved to that model class; primitive type names are kept.

        Args:
            name: Type name of the new model
            constraints: Its constraint map (replaces, never merges with, base's)
            base: Model class to extend
            validator: Engine for the new type; inherited from base if omitted

        Returns:
            The new model class
        """
        namespace: dict[str, Any] = {
            "model_name": name,
            "constraints": self.resolve_constraints(constraints),
            "__module__": base.__module__,
        }
        if validator is not None:
            namespace["validator"] = validator
        model_cls = type(name, (base,), namespace)
        return self.register(model_cls)

    def resolve_constraints(
        self, constraints: Mapping[str, Mapping[str, Any]]
    ) -> Mapping[str, Mapping[str, Any]]:
        """Replace model names in ``type`` constraints with model classes."""
        if not isinstance(constraints, Mapping):
            raise ModelDefinitionError("Invalid constraints")

        resolved: dict[str, Any] = {}
        for property_name, field_constraints in constraints.items():
            if not isinstance(field_constraints, Mapping):
                resolved[property_name] = field_constraints
                continue
            type_value = field_constraints.get("type")
            if (
                isinstance(type_value, str)
                and predicate_for(type_value) is None
                and type_value in self._models
            ):
                field_constraints = {**field_constraints, "type": self._models[type_value]}
            resolved[property_name] = field_constraints
        return resolved

    def get(self, name: str) -> type[ModelBase]:
        """Get a registered model class by name.

        Raises:
            ValueError: If the model is not registered
        """
        if name not in self._models:
            raise ValueError(
                f"Model '{name}' is not registered. "
                "Available models: " + ", ".join(self.list_models())
            )
        return self._models[name]

    def create(
        self,
        name: str,
        document: Mapping[str, Any] | None = None,
        from_storage: bool = False,
        validate: bool = True,
    ) -> ModelBase:
        """Construct an instance of a registered model."""
        model_cls = self.get(name)
        return model_cls(document, from_storage=from_storage, validate=validate)

    def is_registered(self, name: str) -> bool:
        return name in self._models

    def list_models(self) -> list[str]:
        return sorted(self._models.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def clear(self) -> None:
        """Clear all registrations. Primarily for testing."""
        self._models.clear()


def create_default_registry() -> ModelRegistry:
    """Create a registry holding the built-in models."""
    from docmodel.models.i18n import I18NText

    registry = ModelRegistry()
    registry.register(I18NText)
    return registry
