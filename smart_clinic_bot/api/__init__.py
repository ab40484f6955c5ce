"""REST API for the Smart Clinic web catalog."""

from .app import create_app, run
from .routes import create_api_routes

__all__ = ["create_app", "run", "create_api_routes"]
