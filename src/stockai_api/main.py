from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockai.config.state import ConfigState, get_config
from stockai.infrastructure.observability import get_api_logger, setup_logging
from stockai.ingestion.adapters.yahoo_plugin import (
    AcquisitionError,
    YahooDependencyContainer,
    create_container_from_settings,
)
from stockai_api.health import router as health_router
from stockai_api.routes.market import router as market_router

log = get_api_logger()


def create_app(
    settings: ConfigState | None = None,
    container: YahooDependencyContainer | None = None,
) -> FastAPI:
    """Build the API app around a (possibly injected) dependency container."""
    settings = settings or ConfigState()
    container = container or create_container_from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.server.warm_credentials:
            try:
                await container.credential_store.ensure_credentials()
            except AcquisitionError as e:
                log.warning("initial_crumb_fetch_failed", error=str(e))
        yield
        await container.close()

    app = FastAPI(title="StockAI Gateway", version="0.1.0", lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(health_router, prefix="")
    app.include_router(market_router)
    return app


def main() -> None:
    import uvicorn

    settings = get_config()
    setup_logging(level=settings.logging.level, json_logs=settings.logging.json_logs)
    log.info("server_starting", host=settings.server.host, port=settings.server.port)
    uvicorn.run(create_app(settings), host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
