# app/core/middleware.py
"""
HTTP cross-cutting concerns, registered in `app.main.create_app`:

  - request logging (method, path, status, duration, client ip)
  - security headers on every response
  - per-client rate limiting before routing
"""
import logging
import math
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.rate_limit import SlidingWindowLimiter

logger = logging.getLogger("app.requests")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "img-src 'self' data: https:; "
        "font-src 'self' https://fonts.gstatic.com; "
        "connect-src 'self'"
    ),
}

# Paths that are never rate limited.
RATE_LIMIT_EXEMPT = ("/health", "/api-docs")


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _log_request(level: int, request: Request, status_code: int, start: float) -> None:
    duration_ms = math.ceil((time.perf_counter() - start) * 1000)
    logger.log(
        level,
        "%s %s - %s - %sms - %s",
        request.method,
        request.url.path,
        status_code,
        duration_ms,
        client_ip(request),
    )


def install_middleware(app: FastAPI, limiter: SlidingWindowLimiter) -> None:
    """
    Register middleware. Starlette runs the last registered one first,
    so the request logger wraps everything, including 429s.
    """

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if request.url.path.startswith(RATE_LIMIT_EXEMPT):
            return await call_next(request)

        allowed, retry_after = limiter.hit(client_ip(request))
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "message": "Too many requests from this IP, please try again later.",
                    "retryAfter": retry_after,
                },
                headers={"Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(limiter.remaining(client_ip(request)))
        return response

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # Rendered as 500 by the app-wide handler further out.
            _log_request(logging.ERROR, request, 500, start)
            raise
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        _log_request(level, request, response.status_code, start)
        return response
