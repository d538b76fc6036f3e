from fastapi import FastAPI

from depthcrawl.api.routers import create_search_router, create_systems_router


def create_app(indexer, container_env: dict, secret_keys=frozenset()) -> FastAPI:
    """Build the search API: keyword search over `indexer` plus system endpoints."""
    app = FastAPI(title="depthcrawl search")
    app.include_router(create_search_router(indexer))
    app.include_router(create_systems_router(container_env, secret_keys))
    return app
