from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dcrwebapi import __version__
from dcrwebapi.config import ConfigState, get_config
from dcrwebapi.dependency_container import ServiceContext, ServiceDependencyContainer
from dcrwebapi.observability import get_api_logger, setup_logging
from dcrwebapi_server.health import router as health_router
from dcrwebapi_server.routes import router as query_router


def create_app(
    context: ServiceContext | None = None,
    config: ConfigState | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        context: Pre-built service context (tests inject one with a fake fetcher)
        config: Configuration used to build the context when none is given
            (loaded from $DCRWEBAPI_CONFIG_DIR if None)
    """
    if context is None:
        context = ServiceDependencyContainer(config or get_config()).build_context()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log = get_api_logger()
        if context.config.refresh.warm_up:
            report = await context.orchestrator.refresh_once()
            log.info(
                "warm_up_completed",
                updated=len(report.updated),
                failed=len(report.failed),
            )
        context.orchestrator.start()
        try:
            yield
        finally:
            await context.close()
            log.info("service_stopped")

    app = FastAPI(title="dcrwebapi", version=__version__, lifespan=lifespan)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.config.server.cors_origins,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.include_router(health_router, prefix="")
    app.include_router(query_router, prefix="")
    return app


def main() -> None:
    config = get_config()
    setup_logging(level=config.logging.level, json_logs=config.logging.json_logs)

    app = create_app(config=config)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
