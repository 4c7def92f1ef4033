"""Runtime configuration resolved from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class DocModelConfig:
    """Settings shared by the CLI and the API.

    Attributes:
        metadata_path: Directory holding ``models/*.yaml`` declarations
        log_level: Name of the root logging level ("DEBUG", "INFO", ...)
    """

    metadata_path: Path
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DocModelConfig:
        """Create config from environment variables.

        Resolution order for the metadata path:
        1. DOCMODEL_METADATA_PATH env var
        2. {base_path}/metadata
        3. {cwd}/metadata, or its parent's when run from backend/
        """
        log_level = os.environ.get("DOCMODEL_LOG_LEVEL", "INFO").upper()

        metadata_path = os.environ.get("DOCMODEL_METADATA_PATH")
        if metadata_path:
            return cls(metadata_path=Path(metadata_path), log_level=log_level)

        if base_path is None:
            cwd = Path.cwd()
            base_path = cwd.parent if cwd.name == "backend" else cwd

        return cls(metadata_path=base_path / "metadata", log_level=log_level)

    def configure_logging(self) -> None:
        """Apply log_level to the root logger."""
        level = logging.getLevelName(self.log_level)
        if not isinstance(level, int):
            level = logging.INFO
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
