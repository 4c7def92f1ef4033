"""Collection API endpoints.

Every record crosses into the HTTP layer through ``to_json()``.
"""

import logging
from typing import Any, Callable

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from docmodel.collections.store import ModelCollection
from docmodel.models.registry import ModelRegistry
from docmodel.validation.types import ModelDefinitionError, ModelValidationError

logger = logging.getLogger(__name__)


class InsertRequest(BaseModel):
    """Request body for insert operations."""
    data: dict[str, Any]


def _describe_constraints(constraints: Any) -> dict[str, dict[str, Any]]:
    """JSON-safe view of a constraint map (model types become their name)."""
    described: dict[str, dict[str, Any]] = {}
    for property_name, field_constraints in (constraints or {}).items():
        described[property_name] = {}
        for kind, value in field_constraints.items():
            if isinstance(value, type):
                value = getattr(value, "model_name", value.__name__)
            elif isinstance(value, tuple):
                value = list(value)
            described[property_name][kind] = value
    return described


def create_collections_router(
    get_collections: Callable[[], dict[str, ModelCollection]],
    get_registry: Callable[[], ModelRegistry],
) -> APIRouter:
    """Build the router for /api/models and /api/collections."""
    router = APIRouter(prefix="/api")

    def _get_collection(name: str) -> ModelCollection:
        collections = get_collections()
        collection = collections.get(name) if collections else None
        if collection is None:
            raise HTTPException(404, f"Collection '{name}' not found")
        return collection

    @router.get("/models")
    async def list_models() -> dict[str, Any]:
        """List declared models with their constraints."""
        registry = get_registry()
        return {
            "data": [
                {
                    "name": name,
                    "fields": _describe_constraints(registry.get(name).constraints),
                }
                for name in registry.list_models()
            ]
        }

    @router.get("/collections/{collection}")
    async def list_records(collection: str) -> dict[str, Any]:
        """All records of a collection, projected to JSON."""
        records = [record.to_json() for record in _get_collection(collection).find()]
        if not records:
            raise HTTPException(404, "No Record(s) Found")
        return {"data": records}

    @router.get("/collections/{collection}/{record_id}")
    async def get_record(collection: str, record_id: str) -> dict[str, Any]:
        """One record by storage identifier."""
        record = _get_collection(collection).find_one(record_id)
        if record is None:
            raise HTTPException(404, "No Record(s) Found")
        return {"data": record.to_json()}

    @router.post("/collections/{collection}", status_code=201)
    async def insert_record(collection: str, request: InsertRequest):
        """Validate and store a record."""
        target = _get_collection(collection)
        try:
            record = target.insert(request.data)
        except ModelValidationError as e:
            return JSONResponse(status_code=422, content=e.to_dict())
        except ModelDefinitionError as e:
            logger.error("Model definition error in collection %s: %s", collection, e)
            raise HTTPException(500, str(e))
        return {"data": record.to_json()}

    return router
