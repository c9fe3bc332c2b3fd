"""
API routes module.
"""

from worker_integrity.api.routes.health import router as health_router
from worker_integrity.api.routes.workers import router as workers_router

__all__ = ["workers_router", "health_router"]
