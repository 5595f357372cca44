"""
TaskHub FastAPI application entry point.

Workspaces → members → tasks (sub-tasks, tags, attachments), plus the
organization provider webhook that keeps workspaces and memberships in sync.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskhub import __version__
from taskhub.api.errors import register_exception_handlers
from taskhub.config import get_settings
from taskhub.db.session import check_db_connection, engine

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("TaskHub starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise
        if not get_settings().secret_key:
            logger.warning("SECRET_KEY is empty; bearer tokens cannot be verified")
        yield
    finally:
        logger.info("TaskHub shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    register_exception_handlers(app)

    # Mount API routes
    from taskhub.api.tags import router as tags_router
    from taskhub.api.tasks import router as tasks_router
    from taskhub.api.uploads import router as uploads_router
    from taskhub.api.webhooks import router as webhooks_router
    from taskhub.api.workspaces import router as workspaces_router

    app.include_router(tasks_router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(tags_router, prefix="/api/tags", tags=["tags"])
    app.include_router(workspaces_router, prefix="/api/workspaces", tags=["workspaces"])
    app.include_router(uploads_router, prefix="/api", tags=["uploads"])
    app.include_router(webhooks_router, prefix="/api/webhooks", tags=["webhooks"])

    # Uploaded attachment files, served as /uploads/<generated name>
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity."""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
            }
        except SQLAlchemyError:
            logger.exception("Health check failed")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                },
            )

    return app


app = create_app()
