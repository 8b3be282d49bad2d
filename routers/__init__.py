"""API routers for the image relay."""

from .generate import router as generate_router
from .health import router as health_router
from .metrics import router as metrics_router

__all__ = ["generate_router", "health_router", "metrics_router"]
