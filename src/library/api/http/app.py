"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from src.library.api.http.app_data import ApplicationDependencies
from src.library.api.http.errors import INVALID_PAYLOAD_MESSAGE
from src.library.api.http.routers import health
from src.library.api.http.routers.service import book, member
from src.library.api.utils.app_startup import configure_logging
from src.library.core.services import (
    BackgroundTaskPool,
    DbSessionService,
    SearchClientService,
)
from src.library.core.services.database.db_manage import DbManageService
from src.library.core.services.entity_service import BookService, MemberService
from src.library.entities.service.book import BookRepository, BookSearchIndex
from src.library.entities.service.member import MemberRepository, MemberSearchIndex
from src.library.runtime.config.config_data import ConfigData
from src.library.runtime.config.config_template import load_config

__all__ = ["build_dependencies", "close_dependencies", "create_app"]


def build_dependencies(config: ConfigData) -> ApplicationDependencies:
    """Construct every long-lived collaborator from ``config``."""
    database_service = DbSessionService(config.database, config.app.environment)
    search_service = SearchClientService(config.search)
    task_pool = BackgroundTaskPool(config.service.max_background_tasks)

    es_client = search_service.get_client()
    book_index = None
    member_index = None
    if es_client is not None:
        book_index = BookSearchIndex(es_client, config.search.book_index)
        member_index = MemberSearchIndex(es_client, config.search.member_index)

    service_kwargs = {
        "task_pool": task_pool,
        "timeout": config.service.timeout_seconds,
        "index_timeout": config.service.index_timeout_seconds,
    }
    return ApplicationDependencies(
        config=config,
        database_service=database_service,
        search_service=search_service,
        task_pool=task_pool,
        book_service=BookService(
            BookRepository(database_service), book_index, **service_kwargs
        ),
        member_service=MemberService(
            MemberRepository(database_service), member_index, **service_kwargs
        ),
    )


async def close_dependencies(deps: ApplicationDependencies) -> None:
    """Let pending index writes finish, then release connections."""
    grace = deps.config.service.shutdown_grace_seconds
    logger.info(
        "Waiting up to {}s for {} pending background tasks",
        grace,
        deps.task_pool.pending,
    )
    try:
        await deps.task_pool.shutdown(grace)
    finally:
        await deps.search_service.close()
        deps.database_service.dispose()


def _validate_config(config: ConfigData) -> None:
    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    if config.auth.enabled and not config.auth.jwt_secret:
        raise RuntimeError("auth.enabled requires auth.jwt_secret")


async def _log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error"},
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.bind(errors=exc.errors()).info("request.invalid_payload")
    return JSONResponse(status_code=400, content={"error": INVALID_PAYLOAD_MESSAGE})


def create_app(
    config: ConfigData | None = None,
    dependencies: ApplicationDependencies | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Application config; loaded from config.yaml when omitted
        dependencies: Pre-built collaborators. When given, the application
            uses them as-is and leaves closing them to the caller.
    """
    if config is None:
        config = dependencies.config if dependencies is not None else load_config()
    _validate_config(config)

    configure_logging(config.logging, config.app.environment)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up application in {} environment", config.app.environment)
        owned = dependencies is None
        deps = build_dependencies(config) if owned else dependencies

        if config.database.auto_migrate and config.app.environment != "production":
            DbManageService(deps.database_service.engine).create_all()

        app.state.app_dependencies = deps
        try:
            yield
        finally:
            logger.info("Shutting down application")
            if owned:
                await close_dependencies(deps)
            else:
                await deps.task_pool.drain(config.service.shutdown_grace_seconds)

    is_production = config.app.environment == "production"
    app = FastAPI(
        title=config.app.name,
        version=config.app.version,
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(_log_requests)

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    app.include_router(health.router)
    app.include_router(book.router)
    app.include_router(member.router)

    return app
