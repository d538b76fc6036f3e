from fastapi.testclient import TestClient

from depthcrawl.api.server import create_app
from depthcrawl.api.routers.systems import create_systems_router


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) != path:
            continue
        if method.upper() in getattr(route, "methods", set()):
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def test_config_hides_secret_values():
    env = {"USER_AGENT": "Bot/1", "DEPTH_LIMIT": 2, "ELASTICSEARCH_PASSWORD": "hunter2", "DATABASE_URL": None}
    router = create_systems_router(env, frozenset({"ELASTICSEARCH_PASSWORD", "DATABASE_URL"}))
    body = _get_endpoint(router, "/systems/config", "GET")()
    assert body["environment"] == {
        "USER_AGENT": "Bot/1",
        "DEPTH_LIMIT": "2",
        "ELASTICSEARCH_PASSWORD": "set",
        "DATABASE_URL": None,
    }


def test_app_serves_health_and_search_routes():
    client = TestClient(create_app(indexer=None, container_env={}))
    assert client.get("/systems/health").json() == {"status": "ok"}
    assert client.get("/search").status_code == 400
