"""
FastAPI application factory for linknitt.

Creates and configures the FastAPI application with routes, error handlers
and the graph store selected by settings.
"""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from linknitt import __version__
from linknitt.api.dependencies import ServiceContainer, get_services
from linknitt.auth.passwords import PasswordHasher
from linknitt.auth.tokens import TokenService
from linknitt.core.config import Settings, get_settings
from linknitt.core.logging import clear_correlation_id, set_correlation_id
from linknitt.domain.errors import DomainError, InvalidInput
from linknitt.domain.service import CampusService
from linknitt.graph.exceptions import GraphConnectionError
from linknitt.graph.memory import InMemoryDomainStore
from linknitt.graph.neo4j_client import Neo4jClient
from linknitt.graph.schema import SchemaManager
from linknitt.graph.store import DomainStore, Neo4jDomainStore

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def build_store(settings: Settings) -> DomainStore:
    """Create the store selected by settings.graph_backend."""
    if settings.graph_backend == "memory":
        return InMemoryDomainStore()
    return Neo4jDomainStore(Neo4jClient(settings=settings))


def build_services(settings: Settings, store: DomainStore) -> ServiceContainer:
    service = CampusService(
        store,
        PasswordHasher(rounds=settings.bcrypt_rounds),
        TokenService(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl_hours=settings.token_ttl_hours,
        ),
        seed_secret=settings.seed_secret,
        list_limit=settings.list_limit,
        recommend_limit=settings.recommend_limit,
    )
    return ServiceContainer(settings=settings, store=store, service=service)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the Neo4j client on startup and close it on shutdown.

    A connection failure propagates and aborts startup.
    """
    services: ServiceContainer = app.state.services
    client = None
    if isinstance(services.store, Neo4jDomainStore):
        client = services.store.client
        if not client.is_connected:
            try:
                await client.connect()
            except GraphConnectionError:
                logger.critical("Cannot reach the graph store, aborting startup")
                raise
            await SchemaManager(client).init_schema()
            logger.info("Graph schema initialized")
    try:
        yield
    finally:
        if client is not None:
            await client.close()


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def _domain_error(_: Request, exc: DomainError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected request body: %s", exc.errors())
        error = InvalidInput()
        return JSONResponse(status_code=error.status_code, content={"error": error.message})


def create_app(
    settings: Settings | None = None,
    store: DomainStore | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Optional settings (defaults to environment settings)
        store: Optional pre-built store (defaults to the configured backend)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    services = build_services(settings, store or build_store(settings))

    app = FastAPI(
        title="LinkNITT",
        description="Campus marketplace, job board and mentorship API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response

    _register_error_handlers(app)

    app.state.services = services

    # Import routes here to avoid circular imports
    from linknitt.api.routes import router

    def _get_services() -> ServiceContainer:
        return app.state.services

    app.dependency_overrides[get_services] = _get_services

    app.include_router(router)

    # Mounted last so API routes take precedence
    if settings.frontend_dir and os.path.isdir(settings.frontend_dir):
        app.mount("/", StaticFiles(directory=settings.frontend_dir, html=True), name="frontend")

    return app
