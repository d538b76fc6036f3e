from fastapi import APIRouter


def create_systems_router(container_env: dict, secret_keys=frozenset()):
    """Create systems router with access to container environment config."""
    router = APIRouter(prefix="/systems", tags=["System"])

    @router.get("/health")
    def health():
        return {"status": "ok"}

    @router.get("/config")
    def get_config():
        """Return current environment configuration values; secrets only report whether they are set."""
        environment = {}
        for key, value in container_env.items():
            if key in secret_keys:
                environment[key] = "set" if value else None
            else:
                environment[key] = str(value) if value is not None else None
        return {"environment": environment}

    return router
