"""Authentication routes."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request, status

from ...core.hashing import PasswordHasher
from ...database import Database, get_db
from ...schemas.auth import LoginRequest, PasswordChangeRequest, UserResponse
from ...schemas.common import ApiResponse
from ...services.auth import AuthService
from ...services.user_store import SQLAlchemyUserStore

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(
    request: Request,
    db: Database = Depends(get_db)
) -> AuthService:
    """Build the auth service over the app's database and hasher."""
    hasher: PasswordHasher = request.app.state.hasher
    return AuthService(SQLAlchemyUserStore(db), hasher)


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    payload: Dict[str, Any] = Body(...),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new user."""
    user = await auth_service.register(payload)
    return ApiResponse[UserResponse].ok(user)


@router.post("/login", response_model=ApiResponse[UserResponse])
async def login_user(
    login_request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Check credentials and return the user."""
    user = await auth_service.authenticate(login_request.email, login_request.password)
    return ApiResponse[UserResponse].ok(user)


@router.post("/change-password", response_model=ApiResponse[UserResponse])
async def change_password(
    password_change: PasswordChangeRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Change a user's password."""
    user = await auth_service.change_password(
        password_change.email,
        password_change.current_password,
        password_change.new_password,
    )
    return ApiResponse[UserResponse].ok(user)
