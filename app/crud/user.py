"""
CRUD operations for users.

Passwords are stored as bcrypt hashes and never leave this module.
"""

import logging
from typing import Any, Dict, List, Mapping

from app.core.database import QueryExecutor
from app.core.errors import DuplicateKeyError, NotFoundError, UnauthorizedError
from app.core.security import get_password_hash, verify_password
from app.core.sql import build_set_clause

logger = logging.getLogger(__name__)

JS_TO_SQL = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}

USER_COLUMNS = (
    'username, first_name AS "firstName", last_name AS "lastName", '
    'email, is_admin AS "isAdmin"'
)


def _shape(row: Dict[str, Any]) -> Dict[str, Any]:
    # SQLite hands booleans back as 0/1
    row["isAdmin"] = bool(row["isAdmin"])
    return row


def authenticate(db: QueryExecutor, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        UnauthorizedError: If the user is unknown or the password is wrong
    """
    rows = db.execute(
        f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
        [username],
    )
    if rows:
        user = rows[0]
        hashed = user.pop("password")
        if verify_password(password, hashed):
            return _shape(user)

    logger.info(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


def register(db: QueryExecutor, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a user with a hashed password.

    Args:
        data: {username, password, firstName, lastName, email, isAdmin?}

    Raises:
        DuplicateKeyError: If the username is already taken
    """
    username = data["username"]
    duplicate = db.execute("SELECT username FROM users WHERE username = $1", [username])
    if duplicate:
        raise DuplicateKeyError(f"Duplicate username: {username}")

    rows = db.execute(
        f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {USER_COLUMNS}""",
        [
            username,
            get_password_hash(data["password"]),
            data["firstName"],
            data["lastName"],
            data["email"],
            bool(data.get("isAdmin", False)),
        ],
    )
    logger.info(f"Registered user {username}")
    return _shape(rows[0])


def get_multi(db: QueryExecutor) -> List[Dict[str, Any]]:
    """List all users ordered by username."""
    rows = db.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY username")
    return [_shape(row) for row in rows]


def get(db: QueryExecutor, username: str) -> Dict[str, Any]:
    """
    Retrieve a user by username.

    Raises:
        NotFoundError: If no user has this username
    """
    rows = db.execute(f"SELECT {USER_COLUMNS} FROM users WHERE username = $1", [username])
    if not rows:
        raise NotFoundError(f"No user: {username}")
    return _shape(rows[0])


def update(db: QueryExecutor, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user. A supplied password is hashed before storing.

    Args:
        data: Any of {firstName, lastName, password, email, isAdmin}

    Raises:
        EmptyUpdateError: If data is empty
        NotFoundError: If no user has this username
    """
    changes = dict(data)
    if changes.get("password") is not None:
        changes["password"] = get_password_hash(changes["password"])

    set_clause = build_set_clause(changes, JS_TO_SQL)
    username_idx = len(set_clause.values) + 1

    rows = db.execute(
        f"""UPDATE users
            SET {set_clause.clause}
            WHERE username = ${username_idx}
            RETURNING {USER_COLUMNS}""",
        [*set_clause.values, username],
    )
    if not rows:
        raise NotFoundError(f"No user: {username}")

    logger.info(f"Updated user {username}: {', '.join(changes)}")
    return _shape(rows[0])


def remove(db: QueryExecutor, username: str) -> None:
    """
    Delete a user.

    Raises:
        NotFoundError: If no user has this username
    """
    rows = db.execute("DELETE FROM users WHERE username = $1 RETURNING username", [username])
    if not rows:
        raise NotFoundError(f"No user: {username}")

    logger.info(f"Deleted user {username}")
