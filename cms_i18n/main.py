import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from cms_i18n.config import settings
from cms_i18n.database import create_tables
from cms_i18n.exception_handlers import register_exception_handlers
from cms_i18n.middleware.language import LanguageMiddleware
from cms_i18n.routes.articles import articles_router, i18n_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        await create_tables()
    yield


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Multi-locale content groups",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(LanguageMiddleware)
    register_exception_handlers(app)

    app.include_router(articles_router)
    app.include_router(i18n_router)

    logger.info("%s %s ready", settings.app_name, settings.app_version)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("cms_i18n.main:app", host="127.0.0.1", port=8000, reload=settings.debug)
