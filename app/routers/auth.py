# app/routers/auth.py
from fastapi import APIRouter, Depends, Path, status

from app.core.auth import RequestContext, optional_auth, require_admin, require_auth
from app.core.deps import get_auth_service
from app.core.errors import UserNotFound, ValidationFailed
from app.schemas.common import MAX_ID, Envelope
from app.schemas.user import (
    AuthResponse,
    UserListResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    UserRoleUpdate,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


# -------- Sign-up / sign-in --------


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserRegister,
    requesting: RequestContext | None = Depends(optional_auth),
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an account and return it with a token.

    Auth:
      - None required. An admin bearer token allows `role: "admin"`;
        for everyone else the role is downgraded to "user".
    """
    result = service.register(payload, requesting)
    return AuthResponse(
        message="User registered successfully",
        user=result.user,
        token=result.token,
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: UserLogin,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange email + password for a token."""
    result = service.login(payload)
    return AuthResponse(message="Login successful", user=result.user, token=result.token)


# -------- Self profile --------


@router.get("/profile", response_model=UserResponse)
def get_profile(
    current: RequestContext = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires a valid bearer token for an active account.
    """
    user = service.get_user_by_id(current.id)
    if user is None:
        raise UserNotFound()
    return UserResponse(message="Profile retrieved successfully", user=user)


# -------- Admin endpoints --------


@router.get("/users", response_model=UserListResponse)
def list_users(
    current: RequestContext = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
):
    """
    List all users, newest first (admin only).
    """
    users = service.get_all_users(current)
    return UserListResponse(message="Users retrieved successfully", users=users)


@router.put("/users/{user_id}/role", response_model=UserResponse)
def change_role(
    payload: UserRoleUpdate,
    user_id: int = Path(gt=0, le=MAX_ID),
    current: RequestContext = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
):
    """
    Update a user's role (admin only).

    Allowed roles: user, admin.
    """
    user = service.update_user_role(user_id, payload.role, current)
    return UserResponse(message="User role updated successfully", user=user)


@router.delete("/users/{user_id}", response_model=Envelope)
def deactivate_user(
    user_id: int = Path(gt=0, le=MAX_ID),
    current: RequestContext = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
):
    """
    Deactivate a user (admin only). Admins cannot deactivate themselves.
    """
    if user_id == current.id:
        raise ValidationFailed("Cannot deactivate your own account")

    if not service.deactivate_user(user_id, current):
        raise UserNotFound()
    return Envelope(message="User deactivated successfully")
