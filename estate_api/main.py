"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional
import logging

from estate_api.config import Settings, get_settings
from estate_api.database import (
    build_engine,
    build_session_factory,
    check_database_connection,
    close_db_connection,
    create_tables,
    get_db,
)
from estate_api.middleware import OriginAllowListMiddleware, RequestContextMiddleware
from estate_api.routers import auth_router, properties_router
from estate_api.services.auth import AuthService
from estate_api.services.error_handler import ErrorHandlerService
from estate_api.services.upload import UploadService
from estate_api.utils.exceptions import APIException, ServiceUnavailableError
from estate_api.utils.file_utils import CachedStaticFiles

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)


async def seed_admin(settings: Settings, session_factory: async_sessionmaker) -> None:
    """Create the configured admin account; failures are logged, not raised."""
    if not (settings.admin_email and settings.admin_password):
        return
    try:
        async with session_factory() as session:
            await AuthService(session, settings).ensure_admin(settings.admin_email, settings.admin_password)
    except Exception as e:
        logger.error(f"Error creating Admin: {e}")


def build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.
        Handles startup and shutdown events.
        """
        # Startup
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Environment: {settings.environment}")

        uploads = UploadService(settings)
        logger.info(f"Serving uploads from {settings.upload_dir} ({uploads.count_stored()} files)")

        if not await check_database_connection(app.state.engine):
            logger.error("Failed to connect to database on startup")

        await create_tables(app.state.engine)
        logger.info("Tables initialized.")
        await seed_admin(settings, app.state.session_factory)

        yield

        # Shutdown
        logger.info("Shutting down application")
        await close_db_connection(app.state.engine)

    return lifespan


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        """Handle custom API exceptions with structured error responses."""
        return ErrorHandlerService.handle_api_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors as client errors."""
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors with appropriate error responses."""
        return ErrorHandlerService.handle_database_error(exc, request)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle framework HTTP exceptions with structured error responses."""
        return ErrorHandlerService.handle_http_exception(exc, request)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with secure error responses."""
        return ErrorHandlerService.handle_unexpected_error(exc, request)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application from an explicit settings object.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        REST API for a real-estate listing site.

        * **Accounts**: buyer and seller registration, login with a signed token
        * **Listings**: create, list, update and delete properties per owner
        * **Photos**: one optional photo per listing write, served under `/uploads`
        """,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_tags=[
            {"name": "Authentication", "description": "Registration and login"},
            {"name": "Properties", "description": "Property listing management"},
            {"name": "Health", "description": "System health endpoints"},
        ],
        lifespan=build_lifespan(settings),
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url, echo=settings.debug)
    app.state.session_factory = build_session_factory(app.state.engine)

    # Added innermost first; CORS wraps the allow-list so it answers preflights itself
    app.add_middleware(OriginAllowListMiddleware, allowed_origins=settings.cors_origins)

    app.add_middleware(
        RequestContextMiddleware,
        max_request_size=settings.max_request_size,
        timeout_seconds=settings.request_timeout_seconds,
        enable_request_logging=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=settings.cors_methods,
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.include_router(auth_router)
    app.include_router(properties_router)

    app.mount(
        settings.uploads_url_prefix,
        CachedStaticFiles(
            directory=settings.upload_dir,
            check_dir=False,
            max_age=settings.upload_cache_max_age,
        ),
        name="uploads",
    )

    register_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health_check(db: AsyncSession = Depends(get_db)):
        """
        Health check endpoint with database connectivity test.
        Used by container health checks and load balancers.
        """
        try:
            await db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Health check failed: {e}")
            raise ServiceUnavailableError("Database connection failed")

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "database": "connected",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "estate_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
