"""Base class for document models.

A model type is a ModelBase subclass with a constraint map:

    class Address(ModelBase):
        constraints = {
            "street": {"type": "string", "required": True, "blank": False},
            "country": {"type": "string", "choice": ["CA", "US"]},
        }

    class Person(ModelBase):
        constraints = {
            "name": {"type": "string", "required": True},
            "address": {"type": Address},
        }

    person = Person({"name": "Joe", "address": {"street": "Main"}}, from_storage=True)

Constructing a model validates it; a failure raises ModelValidationError.
Constraint maps are frozen when the class is created and are shared by
every instance.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from docmodel.core.types import (
    UNDEFINED,
    Validatable,
    is_function,
    is_model_type,
)
from docmodel.validation.engine import (
    ConstraintMap,
    ConstraintValidator,
    default_validator,
)
from docmodel.validation.types import (
    ConstraintError,
    ModelDefinitionError,
    ModelValidationError,
)

# Document-store identifier, projected even though it is internal
STORAGE_ID_FIELD = "_id"

# Bookkeeping attributes that live on the instance, not in its fields
_INTERNAL_ATTRS = frozenset({"_type_name", "_errors", "_fields"})


def freeze_constraints(constraints: Any) -> ConstraintMap:
    """Validate a constraint map's shape and return a read-only copy.

    List values (e.g. ``choice``) become tuples.

    Raises:
        ModelDefinitionError: If constraints is not a mapping of mappings
    """
    if not isinstance(constraints, Mapping):
        raise ModelDefinitionError("Invalid constraints")

    frozen: dict[str, Mapping[str, Any]] = {}
    for property_name, field_constraints in constraints.items():
        if not isinstance(property_name, str) or not isinstance(field_constraints, Mapping):
            raise ModelDefinitionError(
                f"Invalid constraints for property '{property_name}'"
            )
        frozen[property_name] = MappingProxyType({
            kind: tuple(value) if isinstance(value, list) else value
            for kind, value in field_constraints.items()
        })
    return MappingProxyType(frozen)


def project_value(value: Any) -> Any:
    """Project a field value into its plain JSON form.

    Models are projected at any depth inside mappings and sequences;
    UNDEFINED entries are dropped at every level.
    """
    if isinstance(value, Validatable):
        return value.to_json()
    if isinstance(value, Mapping):
        return {
            key: project_value(item)
            for key, item in value.items()
            if item is not UNDEFINED
        }
    if isinstance(value, (list, tuple)):
        return [project_value(item) for item in value if item is not UNDEFINED]
    return value


class ModelBase:
    """Base class for document models.

    Class attributes:
        model_name: Declared type name; defaults to the class name
        constraints: Constraint map, frozen at class creation
        validator: Engine used by validate()
    """

    model_name: ClassVar[str] = "ModelBase"
    constraints: ClassVar[ConstraintMap | None] = None
    validator: ClassVar[ConstraintValidator] = default_validator()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "model_name" not in cls.__dict__:
            cls.model_name = cls.__name__
        declared = cls.__dict__.get("constraints")
        if declared is not None:
            cls.constraints = freeze_constraints(declared)

    def __init__(
        self,
        document: Mapping[str, Any] | None = None,
        from_storage: bool = False,
        validate: bool = True,
    ):
        """Build a model from a document.

        Args:
            document: Field values to assign
            from_storage: Rebuild nested model fields from plain sub-documents
            validate: Run validate() once fields are assigned

        Raises:
            ModelValidationError: If validate is set and a constraint fails
            ModelDefinitionError: If the type's constraint map is missing or malformed
        """
        if document is not None and not isinstance(document, Mapping):
            raise TypeError(
                f"{type(self).model_name} expects a mapping, got {type(document).__name__}"
            )

        self._type_name = type(self).model_name
        self._errors: tuple[ConstraintError, ...] | None = None
        self._fields: dict[str, Any] = {}

        if from_storage:
            self.assign_properties(document, validate=validate)
        elif document:
            self._fields.update(document)

        if validate:
            self.validate()

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def assign_properties(
        self, document: Mapping[str, Any] | None, validate: bool = True
    ) -> None:
        """Assign fields, rebuilding nested models from plain mappings."""
        if not document:
            return

        constraints = type(self).constraints
        if constraints is None:
            self._fields.update(document)
            return

        for key, value in document.items():
            target = constraints.get(key, {}).get("type")
            if is_model_type(target) and isinstance(value, Mapping):
                value = target(value, from_storage=True, validate=validate)
            self._fields[key] = value

    def properties(self) -> dict[str, Any]:
        """Public, non-callable fields; these are what validation sees."""
        return {
            key: value
            for key, value in self._fields.items()
            if not key.startswith("_") and not is_function(value)
        }

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def errors(self) -> tuple[ConstraintError, ...]:
        """Errors stored by the last failed validate() call."""
        return self._errors or ()

    def validate(self) -> bool:
        """Check every constraint and raise if any fails.

        Returns:
            True when the instance satisfies its constraint map

        Raises:
            ModelValidationError: With every failure found, in declaration order
            ModelDefinitionError: If the constraint map is missing or malformed
        """
        errors = type(self).validator.collect_errors(
            self._type_name, type(self).constraints, self.properties()
        )
        if errors:
            self._errors = tuple(errors)
            raise ModelValidationError(self._type_name, errors)
        self._errors = None
        return True

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def to_json(self, fields: Iterable[str] | None = None) -> dict[str, Any]:
        """Plain, JSON-safe view of the model.

        Args:
            fields: Restrict the projection to these field names; the storage
                id is included whenever present

        Returns:
            Dict of projected values; nested models and lists are projected
            recursively, callables and UNDEFINED values are omitted
        """
        if fields is None:
            selected = self.properties()
        else:
            selected = {name: self._fields[name] for name in fields if name in self._fields}
        if STORAGE_ID_FIELD in self._fields:
            selected = {STORAGE_ID_FIELD: self._fields[STORAGE_ID_FIELD], **selected}

        json: dict[str, Any] = {}
        for key, value in selected.items():
            if key.startswith("_") and key != STORAGE_ID_FIELD:
                continue
            if value is UNDEFINED or is_function(value):
                continue
            json[key] = project_value(value)
        return json

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        fields = self.__dict__.get("_fields")
        if fields is not None and name in fields:
            return fields[name]
        constraints = type(self).constraints
        if fields is not None and constraints is not None and name in constraints:
            return None
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _INTERNAL_ATTRS:
            object.__setattr__(self, name, value)
        else:
            self._fields[name] = value

    def __delattr__(self, name: str) -> None:
        if name in self._fields:
            del self._fields[name]
        else:
            raise AttributeError(name)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._fields[key] = value

    def __delitem__(self, key: str) -> None:
        del self._fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def get(self, key: str, default: Any = None) -> Any:
        return self._fields.get(key, default)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModelBase):
            return NotImplemented
        return self._type_name == other._type_name and self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{self._type_name}({self._fields!r})"
