from medicoweb.routers.dose import router as dose_router
from medicoweb.routers.health import router as health_router
from medicoweb.routers.search import router as search_router

__all__ = [
    "dose_router",
    "health_router",
    "search_router",
]
