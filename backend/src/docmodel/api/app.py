"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from docmodel.api.collections import create_collections_router
from docmodel.collections.store import ModelCollection, create_collections
from docmodel.core.config import DocModelConfig
from docmodel.metadata.loader import ModelMetadataLoader
from docmodel.metadata.validator import validate_metadata_dir
from docmodel.models.registry import ModelRegistry, create_default_registry

logger = logging.getLogger(__name__)


# Global instances (initialized on startup)
registry: ModelRegistry | None = None
collections: dict[str, ModelCollection] = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load model metadata and create one collection per model."""
    global registry, collections

    config = DocModelConfig.from_env()

    # Validate model YAML against the JSON Schema (warn on errors, don't block startup)
    schema_issues = validate_metadata_dir(config.metadata_path)
    if schema_issues:
        error_count = sum(1 for i in schema_issues if i.severity == "error")
        warn_count = sum(1 for i in schema_issues if i.severity == "warning")
        for issue in schema_issues:
            if issue.severity == "error":
                logger.error("Metadata schema error: %s", issue)
            else:
                logger.warning("Metadata schema warning: %s", issue)
        logger.warning(
            "Metadata validation: %d error(s), %d warning(s). "
            "Run 'docmodel models validate' for details.",
            error_count,
            warn_count,
        )

    registry = create_default_registry()
    loader = ModelMetadataLoader(config.metadata_path, registry)
    loader.load_all()

    collections = create_collections(
        {name: registry.get(name) for name in registry.list_models()}
    )
    logger.info("Serving %d collection(s)", len(collections))

    yield

    collections = {}
    registry = None


def _get_collections() -> dict[str, ModelCollection]:
    return collections


def _get_registry() -> ModelRegistry:
    return registry or create_default_registry()


app = FastAPI(title="docmodel API", lifespan=lifespan)
app.include_router(
    create_collections_router(
        get_collections=_get_collections,
        get_registry=_get_registry,
    )
)
