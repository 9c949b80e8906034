"""
Authentication endpoints for user registration, login, and token refresh.

Implements JWT-based stateless authentication:
- POST /register: Create new creator or clipper account
- POST /login: Authenticate and receive JWT tokens
- POST /refresh: Get new tokens using refresh token
- GET /me: Get current user profile
"""

import logging
import uuid
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clipit.core.database import get_db
from clipit.core.security import JWTError, verify_password, create_token_pair, decode_token
from clipit.core.deps import get_current_user
from clipit.core.rate_limiter import check_login_rate_limit, check_register_rate_limit
from clipit.crud import user as user_crud
from clipit.models.user import User
from clipit.schemas.user import (
    UserRegisterRequest,
    UserLoginRequest,
    TokenResponse,
    TokenRefreshRequest,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


def _token_response(user: User) -> TokenResponse:
    access_token, refresh_token = create_token_pair(user)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


@router.post(
    "/register",
    status_code=201,
    response_model=TokenResponse,
    dependencies=[Depends(check_register_rate_limit)],
)
def register(
    request: UserRegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user account as a creator or a clipper.

    Returns JWT tokens for immediate login.
    """
    existing_user = user_crud.get_by_email_or_username(db, request.email, request.username)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email or username already exists"
        )

    try:
        new_user = user_crud.create(db, request)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email or username already exists"
        )

    logger.info(f"New user registered: {new_user.username} ({new_user.role.value})")

    return _token_response(new_user)


@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(check_login_rate_limit)],
)
def login(
    request: UserLoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT tokens plus the user's profile.
    """
    user = user_crud.get_by_email(db, request.email)
    if not user or not verify_password(request.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"User logged in: {user.username}")

    return _token_response(user)


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(
    request: TokenRefreshRequest,
    db: Session = Depends(get_db)
):
    """
    Refresh access token using refresh token.

    Validates the refresh token and issues a new token pair.
    """
    invalid_token = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token"
    )

    try:
        payload = decode_token(request.refresh_token)
    except JWTError:
        raise invalid_token

    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "refresh":
        raise invalid_token

    try:
        user = user_crud.get_by_id(db, uuid.UUID(user_id))
    except ValueError:
        raise invalid_token

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return _token_response(user)


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(
    current_user: User = Depends(get_current_user)
):
    """
    Get current authenticated user's profile.

    Requires valid JWT token in Authorization header.
    """
    return current_user
