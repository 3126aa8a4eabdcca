"""
Authentication endpoints.

Implements JWT-based stateless authentication:
- POST /auth/token: Exchange username/password for a token
- POST /auth/register: Create a (non-admin) account and receive a token
"""

import logging
from fastapi import APIRouter, Depends

from app.core.database import QueryExecutor, get_executor
from app.core.security import create_access_token
from app.crud import user as user_crud
from app.schemas.user import TokenRequest, TokenResponse, UserRegisterRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=TokenResponse)
def login(
    request: TokenRequest,
    db: QueryExecutor = Depends(get_executor)
):
    """
    Authenticate with username and password.

    Returns a JWT to send as `Authorization: Bearer <token>`.
    """
    user = user_crud.authenticate(db, request.username, request.password)
    logger.info(f"User logged in: {user['username']}")
    return TokenResponse(token=create_access_token(user["username"], user["isAdmin"]))


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(
    request: UserRegisterRequest,
    db: QueryExecutor = Depends(get_executor)
):
    """
    Register a new user account.

    Self-registered accounts are never admins. Returns a JWT for immediate use.
    """
    user = user_crud.register(db, request.model_dump(by_alias=True))
    return TokenResponse(token=create_access_token(user["username"], user["isAdmin"]))
