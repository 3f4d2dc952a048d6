from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates
from contextlib import asynccontextmanager
from jinja2 import TemplateError
from pathlib import Path
from typing import Optional
import logging
import sys
import time
import uuid

from api import pages, posts
from config.settings import Settings, load_settings
from constants import REQUEST_ID_HEADER, TemplateNames
from database import ConnectionPool
from exceptions import ApplicationError, ConfigurationError
from init_db import create_tables
from utils.error_handlers import register_exception_handlers
from utils.logging_utils import (
    StructuredLogger,
    clear_logging_context,
    configure_logging,
    set_logging_context,
)

logger = logging.getLogger(__name__)
request_logger = StructuredLogger("blog.requests")

TEMPLATE_DIR = Path(__file__).parent / "templates"


def load_templates(directory: Path = TEMPLATE_DIR) -> Jinja2Templates:
    """
    Build the template environment and compile every page template now.

    Raises:
        ConfigurationError: If a template is missing or does not compile
    """
    templates = Jinja2Templates(directory=str(directory))
    for name in TemplateNames.all():
        try:
            templates.get_template(name)
        except TemplateError as e:
            raise ConfigurationError(f"Template '{name}' could not be loaded from {directory}: {e}") from e
    logger.info(f"Templates compiled: {', '.join(TemplateNames.all())}")
    return templates


def create_app(
    settings: Optional[Settings] = None,
    pool: Optional[ConnectionPool] = None,
    template_dir: Path = TEMPLATE_DIR,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Runtime settings; read from the environment when omitted
        pool: Connection pool to use; built from settings when omitted, in
              which case the app also disposes it on shutdown
        template_dir: Directory holding the page templates

    Raises:
        ConfigurationError: On missing configuration or broken templates
    """
    settings = settings or load_settings()
    templates = load_templates(template_dir)
    owns_pool = pool is None
    pool = pool or ConnectionPool.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan - startup and shutdown"""
        logger.info("Starting blog service...")
        create_tables(pool)
        logger.info(f"Application startup complete ({settings.mode.value} mode)")

        yield

        logger.info("Stopping blog service...")
        if owns_pool:
            pool.dispose()

    app = FastAPI(title="Blog", lifespan=lifespan)
    app.state.settings = settings
    app.state.pool = pool
    app.state.templates = templates

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        """Tag every log line written while serving a request with its id."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_logging_context(request_id=request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            request_logger.info(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={"duration_ms": round((time.perf_counter() - started) * 1000, 1)},
            )
        finally:
            clear_logging_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    register_exception_handlers(app)
    app.include_router(posts.router)
    app.include_router(pages.router)
    return app


if __name__ == "__main__":
    import uvicorn

    try:
        settings = load_settings()
    except ApplicationError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"❌ {e.message}")
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_dir)
    try:
        app = create_app(settings)
    except ApplicationError as e:
        logger.error(f"❌ {e.message}")
        sys.exit(1)

    logger.info(f"🚀 Starting blog on http://{settings.host}:{settings.port}...")
    uvicorn.run(app, host=settings.host, port=settings.port)
