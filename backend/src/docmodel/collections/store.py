"""In-memory document collections that hand out validated models.

Documents are stored as plain ``to_json()`` projections. Reads transform
each stored document back into its model type, rebuilding nested models.
"""

import logging
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from docmodel.models.base import STORAGE_ID_FIELD, ModelBase

logger = logging.getLogger(__name__)


class ModelCollection:
    """A named collection of documents of one model type."""

    def __init__(self, name: str, model_cls: type[ModelBase]):
        self.name = name
        self.model_cls = model_cls
        self._documents: dict[str, dict[str, Any]] = {}

    def insert(self, document: Mapping[str, Any]) -> ModelBase:
        """Validate and store a document.

        Assigns a storage identifier when the document has none.

        Raises:
            ModelValidationError: If the document violates the model's constraints
        """
        doc_id = str(document.get(STORAGE_ID_FIELD) or uuid4().hex)
        model = self.model_cls(
            {**document, STORAGE_ID_FIELD: doc_id}, from_storage=True
        )
        self._documents[doc_id] = model.to_json()
        logger.debug("Inserted %s into %s", doc_id, self.name)
        return model

    def find(self) -> list[ModelBase]:
        """All stored documents, as models."""
        return [self._transform(doc) for doc in self._documents.values()]

    def find_one(self, doc_id: str) -> ModelBase | None:
        """The document with the given identifier, or None."""
        doc = self._documents.get(doc_id)
        if doc is None:
            return None
        return self._transform(doc)

    def remove(self, doc_id: str) -> bool:
        return self._documents.pop(doc_id, None) is not None

    def _transform(self, doc: dict[str, Any]) -> ModelBase:
        return self.model_cls(doc, from_storage=True)

    def __len__(self) -> int:
        return len(self._documents)


def create_collections(
    model_classes: Mapping[str, type[ModelBase]],
) -> dict[str, ModelCollection]:
    """One collection per model, keyed by model name."""
    return {name: ModelCollection(name, model_cls) for name, model_cls in model_classes.items()}
