"""HTTP facade: FastAPI routes, intercept hook and status mapping."""

from mockcms.api.app import ToolApi, coerce_response
from mockcms.api.routes import router

__all__ = ["ToolApi", "coerce_response", "router"]
