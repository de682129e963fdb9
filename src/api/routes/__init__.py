"""API route modules."""

from .allocations import router as allocations_router
from .employees import router as employees_router
from .health import router as health_router
from .opportunities import router as opportunities_router
from .permissions import router as permissions_router
from .reports import router as reports_router

__all__ = [
    "allocations_router",
    "employees_router",
    "health_router",
    "opportunities_router",
    "permissions_router",
    "reports_router",
]
