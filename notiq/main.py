"""FastAPI entry point (wires middlewares, exception handlers and routers)."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from notiq.api.router import api_router
from notiq.api.routers import health
from notiq.core.config import settings
from notiq.core.exceptions import register_exception_handlers
from notiq.core.logging import setup_logging
from notiq.core.middleware import add_middlewares
from notiq.infrastructure.db.bootstrap import ensure_collections
from notiq.infrastructure.db.mongo import close_mongo, db_ready, init_mongo

_log = logging.getLogger("notiq.startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_mongo()
    if db_ready():
        ensure_collections()
    else:
        _log.warning("Mongo not ready; skipping ensure_collections()")
    yield
    close_mongo()


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    add_middlewares(app)
    register_exception_handlers(app)

    app.include_router(health.router)
    # Mount API routers under the configured prefix
    app.include_router(api_router, prefix=settings.api_prefix_normalized)
    return app


app = create_app()
