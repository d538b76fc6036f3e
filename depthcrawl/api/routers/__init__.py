from .search import create_search_router as create_search_router
from .systems import create_systems_router as create_systems_router

__all__ = ["create_search_router", "create_systems_router"]
