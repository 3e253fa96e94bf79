"""
Application factory.

    create_app(settings)  -> FastAPI app with logging, database, routers,
                             exception handlers and the trace id middleware
    run()                 -> console entry point (uvicorn)

Order matters in create_app:
  1. logging is configured first, so everything after it logs with trace ids;
  2. the same ErrorNormalizer instance serves the exception handlers and the
     middleware, so every failure path produces the same envelope;
  3. TraceIdMiddleware is added last, which makes it the outermost user
     middleware: the trace scope is open before any other code runs for a request.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .api.v1 import router as api_router
from .api.v1.error_handlers import register_exception_handlers
from .api.v1.health import router as health_router
from .config import Settings, get_settings
from .core.logging import get_trace_logger, setup_logging, stop_queue_logging
from .core.tracing.middleware import TraceIdMiddleware
from .database.session import build_engine, build_sessionmaker, create_all
from .exceptions.normalizer import ErrorNormalizer

logger = get_trace_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_all(app.state.engine)
    logger.info(f"{app.state.settings.APP_NAME} {__version__} started (env={app.state.settings.ENV})")
    try:
        yield
    finally:
        await app.state.engine.dispose()
        logger.info("Shutdown complete")
        stop_queue_logging()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title=settings.APP_NAME, version=__version__, lifespan=lifespan)

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)

    normalizer = ErrorNormalizer(hardened=settings.HARDENED_ERRORS)
    app.state.normalizer = normalizer
    register_exception_handlers(app, normalizer)

    app.include_router(health_router)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    app.add_middleware(TraceIdMiddleware, settings=settings, normalizer=normalizer)
    return app


def run() -> None:
    uvicorn.run("school_records.main:create_app", factory=True, host="0.0.0.0", port=8000, log_config=None)
