"""
API v1 endpoints.
"""

from .health import router as health_router
from .tools import router as tools_router

__all__ = ["health_router", "tools_router"]
