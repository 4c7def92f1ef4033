"""HTTP API over model collections."""

from docmodel.api.app import app

__all__ = ["app"]
