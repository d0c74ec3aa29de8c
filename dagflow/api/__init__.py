"""FastAPI application for dagflow."""

from dagflow.api.main import app

__all__ = ["app"]
