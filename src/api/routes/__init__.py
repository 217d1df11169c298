"""
API routes for the line sorter.

Available routers:
- health: Health check endpoint
- queue: Dedupe, enqueue, list, remove, clear and claim
- history: Claim history listing and search
- sorter_settings: Per-team settings and caller cooldown
"""

from src.api.routes.health import router as health_router
from src.api.routes.history import router as history_router
from src.api.routes.queue import router as queue_router
from src.api.routes.sorter_settings import router as sorter_settings_router

__all__: list[str] = [
    "health_router",
    "history_router",
    "queue_router",
    "sorter_settings_router",
]
