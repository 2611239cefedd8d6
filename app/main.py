import uvicorn
from fastapi import FastAPI

from app.api.routes.health import router as health_router
from app.api.routes.regenerate import router as regenerate_router
from app.core.config import get_settings
from app.core.logging import configure_logging
from app.economy.regen.types import RegenConfig


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    # fail fast on a bad tick/yield configuration
    RegenConfig.from_settings(settings)

    app = FastAPI(
        title="cx Regeneration API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(health_router)
    app.include_router(regenerate_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
