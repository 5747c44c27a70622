"""
HTTP API for the client & contract service.

This package provides a single FastAPI application that exposes:
- Client endpoints (create, read, update, deactivate)
- Contract endpoints (create, list active, sum active cost, update cost)
"""

from api.main import app

__all__ = ["app"]
