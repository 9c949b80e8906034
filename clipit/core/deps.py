"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect endpoints and extract user context.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from clipit.core.database import get_db
from clipit.core.security import decode_token
from clipit.models.user import User, UserRole

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer()


def _user_from_token(token: str, db: Session) -> Optional[User]:
    """Resolve an access token to an existing user, or None."""
    try:
        payload = decode_token(token)
    except JWTError:
        return None

    user_id = payload.get("sub")
    if user_id is None or payload.get("type") == "refresh":
        return None

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        return None

    return db.query(User).filter(User.id == user_uuid).first()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate the current user from JWT token.

    This dependency:
    1. Extracts the Bearer token from Authorization header
    2. Decodes and validates the JWT
    3. Verifies the user still exists

    Raises:
        HTTPException 401: If token is invalid or user not found
    """
    user = _user_from_token(credentials.credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def require_role(role: UserRole):
    """
    Build a dependency that only lets users with the given role through.

    Usage:
        @router.post("/jobs")
        def create_job(creator: User = Depends(require_role(UserRole.CREATOR))):
            ...

    Raises:
        HTTPException 403: If the user has another role
    """
    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{role.value} role required"
            )
        return user

    return role_checker


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Extract user from JWT token if provided, otherwise return None.

    Used by public endpoints whose output depends on who is asking
    (e.g. GET /jobs?creator=me). An invalid token is treated as anonymous.
    """
    if not credentials:
        return None

    return _user_from_token(credentials.credentials, db)
