"""API route modules."""
from .dashboard import router as dashboard_router
from .supporters import router as supporters_router

__all__ = [
    "dashboard_router",
    "supporters_router",
]
