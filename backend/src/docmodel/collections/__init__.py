"""Document collections backed by model validation."""

from docmodel.collections.store import ModelCollection, create_collections

__all__ = ["ModelCollection", "create_collections"]
