# app/main.py
from contextlib import asynccontextmanager
from datetime import timedelta
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.auth import AuthMiddleware
from app.core.config import Settings, get_settings
from app.core.middleware import client_ip, install_middleware
from app.core.rate_limit import SlidingWindowLimiter
from app.core.security import TokenCodec
from app.database import build_engine, create_db_and_tables
from app.repositories.cart_repo import CartRepository
from app.repositories.user_repo import UserRepository
from app.services.auth_service import AuthService
from app.services.cart_service import CartService
from app.services.payment_service import PaymentService

# Routers
from app.routers.auth import router as auth_router
from app.routers.cart import router as cart_router
from app.routers.health import router as health_router
from app.routers.payment import router as payment_router

logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
      - Create the bootstrap admin when configured.

    Shutdown:
      - Dispose the engine (closes pooled connections).
    """
    settings: Settings = app.state.settings
    logger.info("🔄 Startup: connecting to database (%s)...", app.state.engine.dialect.name)
    try:
        create_db_and_tables(app.state.engine)
        logger.info("✅ Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: DB connection FAILED: {e}")
        raise

    app.state.auth_service.bootstrap_admin(
        settings.BOOTSTRAP_ADMIN_EMAIL, settings.BOOTSTRAP_ADMIN_PASSWORD
    )
    logger.info("🚀 %s ready (%s)", settings.PROJECT_NAME, settings.APP_ENV)
    yield

    logger.info("Shutting down, closing database connections")
    app.state.engine.dispose()


def _envelope(status_code: int, message: str, error: str | None = None, headers=None) -> JSONResponse:
    content: dict = {"success": False, "message": message}
    if error:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def install_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Render every failure as `{success: false, message, error?}`.

    Typed failures (app.core.errors) and plain HTTPExceptions keep their
    status and message. Internal details only reach the client in
    development.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(
            exc.status_code,
            str(exc.detail),
            getattr(exc, "error", None),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        detail = first.get("msg", "Invalid input data")
        return _envelope(400, "Validation error", f"{field}: {detail}" if field else detail)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled error on %s %s from %s", request.method, request.url.path, client_ip(request)
        )
        return _envelope(
            500,
            "Internal server error",
            str(exc) if settings.is_development else None,
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application and its process-scoped collaborators.

    Engine, token codec, services and the rate limiter are created here
    once and stored on `app.state`; nothing reads them from module globals.
    """
    settings = settings or get_settings()
    settings.validate_runtime()

    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
        docs_url="/api-docs",
        openapi_url="/api-docs.json",
        redoc_url=None,
    )

    engine = build_engine(settings)
    codec = TokenCodec(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
        expires_in=timedelta(hours=settings.JWT_EXPIRES_HOURS),
    )
    user_repo = UserRepository()

    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.engine = engine
    app.state.auth = AuthMiddleware(engine, codec, user_repo)
    app.state.auth_service = AuthService(engine, user_repo, codec)
    app.state.cart_service = CartService(engine, CartRepository())
    app.state.payment_service = PaymentService(
        settings.STRIPE_SECRET_KEY, settings.STRIPE_API_VERSION
    )

    # --- CORS configuration ---
    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    limiter = SlidingWindowLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_MS / 1000,
    )
    app.state.rate_limiter = limiter
    install_middleware(app, limiter)
    install_exception_handlers(app, settings)

    app.include_router(auth_router, prefix=settings.API_PREFIX)
    app.include_router(cart_router, prefix=settings.API_PREFIX)
    app.include_router(payment_router, prefix=settings.API_PREFIX)
    app.include_router(health_router)

    return app


app = create_app()
