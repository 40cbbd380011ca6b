"""
TIL Backend — Authentication Dependencies
==========================================

What:  FastAPI dependencies that gate mutating endpoints.
How:   `require_user` reads `Authorization: Bearer <token>` and resolves it to
       a User through AuthService; `basic_credentials` reads HTTP Basic
       credentials for the login route.
Who:   Added to protected routes as `Depends(require_user)`.

Both security schemes use auto_error=False so that missing credentials
raise UnauthorizedError and go through the common error envelope instead of
FastAPI's default 403 body.
"""

from fastapi import Depends
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import UnauthorizedError
from app.models.user import User
from app.services.auth_service import auth_service

bearer_scheme = HTTPBearer(auto_error=False)
basic_scheme = HTTPBasic(auto_error=False)


async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    Dependency returning the authenticated caller.

    Raises:
        UnauthorizedError: Header missing, not Bearer, or token unknown (→ 401)
    """
    if credentials is None:
        raise UnauthorizedError(message="Authentication required")
    return await auth_service.authenticate_token(db, credentials.credentials)


async def basic_credentials(
    credentials: HTTPBasicCredentials | None = Depends(basic_scheme),
) -> HTTPBasicCredentials:
    """
    Dependency returning HTTP Basic credentials for login.

    Raises:
        UnauthorizedError: Header missing or malformed (→ 401, Basic challenge)
    """
    if credentials is None:
        raise UnauthorizedError(message="Basic credentials required", scheme="Basic")
    return credentials
