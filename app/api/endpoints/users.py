"""
User management endpoints.

Listing and creating users is reserved to admins; reading, updating and
deleting a single user is allowed to that user or to an admin.
"""

from fastapi import APIRouter, Depends

from app.core.database import QueryExecutor, get_executor
from app.core.deps import ensure_admin, ensure_self_or_admin
from app.core.security import create_access_token
from app.crud import user as user_crud
from app.schemas.user import (
    UserCreateRequest,
    UserUpdateRequest,
    UserEnvelope,
    UserCreatedEnvelope,
    UserListEnvelope,
    UserDeletedResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=201, response_model=UserCreatedEnvelope, dependencies=[Depends(ensure_admin)])
def create_user(
    request: UserCreateRequest,
    db: QueryExecutor = Depends(get_executor)
):
    """
    Add a user, optionally as an admin. Returns the user and a token for them.

    Authorization required: admin
    """
    user = user_crud.register(db, request.model_dump(by_alias=True))
    token = create_access_token(user["username"], user["isAdmin"])
    return {"user": user, "token": token}


@router.get("", response_model=UserListEnvelope, dependencies=[Depends(ensure_admin)])
def list_users(db: QueryExecutor = Depends(get_executor)):
    """
    List all users ordered by username.

    Authorization required: admin
    """
    return {"users": user_crud.get_multi(db)}


@router.get("/{username}", response_model=UserEnvelope, dependencies=[Depends(ensure_self_or_admin)])
def get_user(username: str, db: QueryExecutor = Depends(get_executor)):
    """Authorization required: same user or admin"""
    return {"user": user_crud.get(db, username)}


@router.patch("/{username}", response_model=UserEnvelope, dependencies=[Depends(ensure_self_or_admin)])
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: QueryExecutor = Depends(get_executor)
):
    """
    Partially update a user: { firstName, lastName, password, email }.

    Authorization required: same user or admin
    """
    user = user_crud.update(db, username, request.model_dump(exclude_unset=True, by_alias=True))
    return {"user": user}


@router.delete("/{username}", response_model=UserDeletedResponse, dependencies=[Depends(ensure_self_or_admin)])
def delete_user(username: str, db: QueryExecutor = Depends(get_executor)):
    """Authorization required: same user or admin"""
    user_crud.remove(db, username)
    return {"deleted": username}
