"""
FastAPI dependencies for authentication and authorization.

A bearer token is optional on every request: get_current_user resolves it to
TokenData when it verifies and to None otherwise. The ensure_* dependencies
then enforce the three access tiers (logged in, admin, self-or-admin).
"""

import logging
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from app.core.errors import UnauthorizedError
from app.core.security import decode_token
from app.schemas.user import TokenData

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>); absence is not an error
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[TokenData]:
    """
    Extract the user from a JWT bearer token, if one was sent.

    Invalid or expired tokens are treated like a missing token.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.debug("Ignoring invalid bearer token")
        return None

    username = payload.get("sub")
    if username is None:
        return None

    return TokenData(username=username, is_admin=bool(payload.get("is_admin", False)))


async def ensure_logged_in(
    user: Optional[TokenData] = Depends(get_current_user),
) -> TokenData:
    """
    Require a valid token.

    Raises:
        UnauthorizedError: If no valid token was provided
    """
    if user is None:
        raise UnauthorizedError("Must be logged in")
    return user


async def ensure_admin(
    user: TokenData = Depends(ensure_logged_in),
) -> TokenData:
    """
    Require a valid token belonging to an admin.

    Raises:
        UnauthorizedError: If not logged in, or logged in without admin rights
    """
    if not user.is_admin:
        raise UnauthorizedError("Requires admin")
    return user


async def ensure_self_or_admin(
    username: str,
    user: TokenData = Depends(ensure_logged_in),
) -> TokenData:
    """
    Require an admin, or the user named by the {username} path parameter.

    Raises:
        UnauthorizedError: If the token belongs to another, non-admin user
    """
    if not (user.is_admin or user.username == username):
        raise UnauthorizedError("Requires admin or matching user")
    return user
