"""FastAPI application for the Bondarys identity service.

Endpoints live under ``/api/v1``; ``/health`` stays unversioned for load balancers.

Process-wide collaborators (database engine, HTTP client, SSO resolver,
notifier, audit trail) are created once per application and kept on
``app.state``. Request-scoped services are assembled from them in
``dependencies.py``.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

import httpx
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from bondarys.presentation.api.exception_handlers import setup_exception_handlers
from bondarys.presentation.api.routers import admin_router, auth_router
from bondarys_config.settings import Settings, get_settings
from bondarys_identity.infrastructure.audit import LoggingAuditTrail
from bondarys_identity.infrastructure.email import EmailNotifier
from bondarys_identity.infrastructure.persistence.sqlalchemy import (
    create_engine_for,
    create_tables,
)
from bondarys_identity.infrastructure.sso import SsoResolver

_OWN_LOGGERS = ("bondarys", "bondarys_auth", "bondarys_identity")
_CHATTY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite")


@lru_cache(maxsize=4)
def _configure_logging(level_name: str) -> None:
    """Send log records to stdout, once per distinct level."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in _OWN_LOGGERS:
        logging.getLogger(name).setLevel(level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Sign-in and session management.

**Sign-in paths:**
- Email and password
- Google, Facebook or Apple (provider token)
- Six-digit one-time code sent by email

**Sessions:**
- Short-lived access tokens, long-lived single-use refresh tokens
- Every refresh rotates the token pair; reused refresh tokens are refused
""",
    },
    {
        "name": "Admin",
        "description": "Support tooling: act as another account and switch back.",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
]


async def _init_database_schema(engine: AsyncEngine) -> None:
    try:
        await create_tables(engine)
    except ConnectionRefusedError:
        logger.critical("Database at startup refused the connection")
        raise SystemExit(1) from None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting %s API v%s...", app.state.settings.app_name, API_VERSION)
    await _init_database_schema(app.state.engine)
    yield

    logger.info("Shutting down")
    await app.state.http_client.aclose()
    await app.state.engine.dispose()
    logger.info("Engine disposed")


def create_v1_router() -> APIRouter:
    v1_router = APIRouter()
    v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    v1_router.include_router(admin_router, prefix="/admin", tags=["Admin"])
    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Parameters
    ----------
    settings
        Configuration to use instead of the cached environment settings.
    """
    if settings is None:
        settings = get_settings()
    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Account sign-in, token rotation and support impersonation.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    engine = create_engine_for(settings.database_url)
    http_client = httpx.AsyncClient(timeout=settings.sso_http_timeout)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    app.state.http_client = http_client
    app.state.sso_resolver = SsoResolver.from_settings(settings, http_client)
    app.state.notifier = EmailNotifier(settings)
    app.state.audit_trail = LoggingAuditTrail()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        return {
            "status": "healthy",
            "version": API_VERSION,
            "api_versions": ["v1"],
        }

    return app


app = create_app()
