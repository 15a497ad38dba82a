"""HTTP layer: FastAPI app factory, routers and response envelope."""

from .api import create_app

__all__ = ["create_app"]
