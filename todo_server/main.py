"""FastAPI application entry point."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_server.api import health, todos
from todo_server.core.config import LOCAL_STATIC_BASE, Settings, get_settings
from todo_server.core.logging_config import configure_logging
from todo_server.persistence.db import build_engine, build_session_factory, init_db
from todo_server.services.fragments import FragmentError, FragmentRenderer
from todo_server.services.task_store import TaskStore
from todo_server.services.todo_service import TodoService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the store once at startup and dispose of it at shutdown."""
    settings: Settings = app.state.settings
    logger.info("Starting %s...", settings.PROJECT_NAME)

    # Schema errors propagate: the server must not start without a store
    engine = build_engine(settings.DATABASE_URL)
    init_db(engine)

    store = TaskStore(build_session_factory(engine))
    renderer = FragmentRenderer(settings.TEMPLATES_DIR, reload=settings.TEMPLATE_RELOAD)
    app.state.task_store = store
    app.state.todo_service = TodoService(store, renderer, static_base=settings.STATIC_BASE)
    try:
        yield
    finally:
        logger.info("Shutting down %s...", settings.PROJECT_NAME)
        engine.dispose()


async def _http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    if exc.status_code == 404:
        logger.info("%s requested, 404 returned", request.url.path)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def _storage_error(request: Request, exc: SQLAlchemyError) -> PlainTextResponse:
    logger.exception("Storage error handling %s %s", request.method, request.url.path)
    return PlainTextResponse("Server error: storage unavailable", status_code=500)


async def _fragment_error(request: Request, exc: FragmentError) -> PlainTextResponse:
    logger.exception("Template error handling %s %s", request.method, request.url.path)
    return PlainTextResponse(f"Server error: {exc}", status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for ``settings`` (read from the environment when omitted)."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Server-rendered todo list driven by htmx fragments",
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(SQLAlchemyError, _storage_error)
    app.add_exception_handler(FragmentError, _fragment_error)

    if settings.serve_assets:
        app.mount(LOCAL_STATIC_BASE, StaticFiles(directory=settings.ASSETS_DIR), name="assets")
        logger.info("Serving static assets from %s", settings.ASSETS_DIR)

    app.include_router(health.router, tags=["health"])
    app.include_router(todos.router, tags=["todos"])
    return app


def create_default_app() -> FastAPI:
    """Entry point for uvicorn: environment settings plus logging."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    return create_app(settings)
