"""
Order Service - Main FastAPI Application.

REST API layer for creating, fetching and listing orders. Order status is
decided asynchronously by the order processor worker.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import ServiceContainer, build_container
from api.routes import health, orders
from core.domain.exceptions import InternalError, OrderServiceError, ThrottlingError
from core.domain.value_objects import RequestID
from core.infrastructure.logging import configure_logging
from core.settings import AppSettings, get_app_settings


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(
    container: Optional[ServiceContainer] = None,
    settings: Optional[AppSettings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Ready-made clients (tests); built from settings at startup otherwise
        settings: Settings to build from; defaults to get_app_settings()
    """
    settings = settings or (container.settings if container else get_app_settings())
    configure_logging(settings.service.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = False
        if getattr(app.state, "container", None) is None:
            app.state.container = await build_container(settings)
            owned = True
        logger.info(f"{settings.service.service_name} API starting up...")
        logger.info("Swagger UI available at: /docs")
        try:
            yield
        finally:
            logger.info(f"{settings.service.service_name} API shutting down...")
            if owned:
                await app.state.container.close()
                app.state.container = None

    app = FastAPI(
        title="Order Service API",
        description="""
        Event-driven order management.

        Features:
        - Order intake with full validation
        - Asynchronous triage (confirm / review / approval)
        - Status-filtered, cursor-paginated listing
        """,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.container = container

    # =========================================================================
    # CORS MIDDLEWARE
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )

    # =========================================================================
    # REQUEST ID + LOGGING MIDDLEWARE
    # =========================================================================

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Tag the request with an id and log it with timing."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(RequestID.generate())
        request.state.request_id = request_id
        start_time = time.time()

        logger.info(f"[{request_id}] -> {request.method} {request.url.path}")

        response = await call_next(request)

        duration = time.time() - start_time
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"[{request_id}] <- {request.method} {request.url.path} "
            f"[{response.status_code}] ({duration:.3f}s)"
        )
        return response

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(OrderServiceError)
    async def order_service_error_handler(request: Request, exc: OrderServiceError):
        """Render domain errors as `{error, message}` bodies."""
        request_id = getattr(request.state, "request_id", None)
        body = exc.to_dict()
        headers = {}

        if isinstance(exc, ThrottlingError):
            headers["Retry-After"] = str(exc.retry_after)
        if exc.status_code >= 500:
            logger.error(f"[{request_id}] {exc.error}: {exc.message}")
            body["requestId"] = request_id

        return JSONResponse(status_code=exc.status_code, content=body, headers=headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all uncaught exceptions."""
        request_id = getattr(request.state, "request_id", None)
        logger.error(
            f"[{request_id}] Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        body = InternalError().to_dict()
        body["requestId"] = request_id
        return JSONResponse(status_code=500, content=body)

    # =========================================================================
    # INCLUDE ROUTERS
    # =========================================================================

    app.include_router(health.router, tags=["Health"])
    app.include_router(orders.router, prefix="/orders", tags=["Orders"])

    @app.get("/", tags=["Root"])
    async def root():
        """API root endpoint."""
        return {
            "message": "Order Service API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
