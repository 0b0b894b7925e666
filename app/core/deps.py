# app/core/deps.py
"""
Providers for the process-scoped services built in `create_app`.

Routers depend on these instead of importing module-level singletons, so a
test (or a second app instance) can run with its own engine and settings.
"""
from fastapi import Request

from app.core.config import Settings
from app.services.auth_service import AuthService
from app.services.cart_service import CartService
from app.services.payment_service import PaymentService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_cart_service(request: Request) -> CartService:
    return request.app.state.cart_service


def get_payment_service(request: Request) -> PaymentService:
    return request.app.state.payment_service
