"""Load model declarations from YAML files.

Each ``models/*.yaml`` file declares one model:

    model: Person
    description: A person with a postal address
    constraints:
      name: {type: string, required: true, blank: false}
      gender: {type: string, choice: [M, F]}
      address: {type: Address}

A string ``type`` that is not a primitive type name refers to another model,
either declared in the same directory or already present in the registry.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from docmodel.core.types import predicate_for
from docmodel.models.registry import ModelRegistry
from docmodel.validation.types import ModelDefinitionError

logger = logging.getLogger(__name__)


@dataclass
class ModelDefinition:
    """A model declaration read from YAML."""

    name: str
    constraints: dict[str, dict[str, Any]]
    source: Path | None = None
    description: str = ""
    references: list[str] = field(default_factory=list)


class ModelMetadataLoader:
    """Loads model definitions from YAML and declares them on a registry."""

    def __init__(self, metadata_path: Path, registry: ModelRegistry):
        self.metadata_path = metadata_path
        self.registry = registry
        self.definitions: dict[str, ModelDefinition] = {}
        self._declared: set[str] = set()

    def load_all(self) -> None:
        """Read every model file, then declare the models in dependency order."""
        self._load_definitions()
        declaring: list[str] = []
        for name in self.definitions:
            self._declare(name, declaring)

    def _load_definitions(self) -> None:
        self.definitions = {}
        models_path = self.metadata_path / "models"
        if not models_path.exists():
            logger.info("No model metadata found at %s", models_path)
            return

        for yaml_file in sorted(models_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if data and "model" in data:
                definition = self._resolve_definition(data, yaml_file)
                if definition.name in self.definitions:
                    raise ModelDefinitionError(
                        f"Model '{definition.name}' is declared in both "
                        f"{self.definitions[definition.name].source} and {yaml_file}"
                    )
                self.definitions[definition.name] = definition

    def _resolve_definition(self, data: dict, source: Path | None = None) -> ModelDefinition:
        """Convert a parsed YAML document to a ModelDefinition."""
        name = data["model"]
        constraints = data.get("constraints") or {}
        if not isinstance(constraints, dict):
            raise ModelDefinitionError(f"Model '{name}' has invalid constraints")

        references = []
        for property_name, field_constraints in constraints.items():
            if not isinstance(field_constraints, dict):
                raise ModelDefinitionError(
                    f"Model '{name}' has invalid constraints for property '{property_name}'"
                )
            type_value = field_constraints.get("type")
            if isinstance(type_value, str) and predicate_for(type_value) is None:
                references.append(type_value)

        return ModelDefinition(
            name=name,
            constraints=constraints,
            source=source,
            description=data.get("description", ""),
            references=references,
        )

    def _declare(self, name: str, declaring: list[str]) -> None:
        """Declare a model after the models it references."""
        if name in declaring:
            cycle = " -> ".join(declaring[declaring.index(name):] + [name])
            raise ModelDefinitionError(f"Circular model reference: {cycle}")

        if name in self._declared:
            return

        definition = self.definitions[name]
        if self.registry.is_registered(name):
            raise ModelDefinitionError(
                f"Model '{name}' from {definition.source} is already registered"
            )

        declaring.append(name)
        for reference in definition.references:
            if reference in self.definitions:
                self._declare(reference, declaring)
            elif not self.registry.is_registered(reference):
                raise ModelDefinitionError(
                    f"Model '{name}' references unknown model '{reference}'"
                )
        declaring.pop()

        self.registry.declare_subtype(name, definition.constraints)
        self._declared.add(name)
        logger.info(
            "Declared model %s (%d properties) from %s",
            name,
            len(definition.constraints),
            definition.source,
        )

    def get_definition(self, name: str) -> ModelDefinition | None:
        """Get a loaded definition by name."""
        return self.definitions.get(name)

    def list_models(self) -> list[str]:
        """List the names of the models loaded from YAML."""
        return list(self.definitions.keys())
