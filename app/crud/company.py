"""
CRUD operations for companies.

Statements are plain SQL run through the QueryExecutor. Filter and update
fragments come from app.core.sql, driven by the tables below, so column
names in the SQL text are always drawn from these allow-lists.
"""

import logging
from typing import Any, Dict, List, Mapping

from app.core.database import QueryExecutor
from app.core.errors import DuplicateKeyError, NotFoundError
from app.core.sql import (
    FilterRule,
    build_set_clause,
    build_where_clause,
    contains_pattern,
    where_sql,
)

logger = logging.getLogger(__name__)

# API field name -> column name, for partial updates
JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

# Supported search filters
FILTERS = {
    "nameLike": FilterRule("lower(name) LIKE lower({})", contains_pattern),
    "minEmployees": FilterRule("num_employees >= {}"),
    "maxEmployees": FilterRule("num_employees <= {}"),
}

COMPANY_COLUMNS = (
    'handle, name, description, '
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)


def _check_name_free(db: QueryExecutor, name: str, exclude_handle: str = None) -> None:
    # companies.name is UNIQUE; report a clash as a 400 instead of an IntegrityError
    taken = db.execute(
        "SELECT handle FROM companies WHERE name = $1 AND handle <> $2",
        [name, exclude_handle or ""],
    )
    if taken:
        raise DuplicateKeyError(f"Duplicate company name: {name}")

def create(db: QueryExecutor, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a company.

    Args:
        db: Query executor
        data: {handle, name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        DuplicateKeyError: If the handle or the name is already taken
    """
    handle = data["handle"]
    duplicate = db.execute("SELECT handle FROM companies WHERE handle = $1", [handle])
    if duplicate:
        raise DuplicateKeyError(f"Duplicate company: {handle}")
    _check_name_free(db, data["name"])

    rows = db.execute(
        f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {COMPANY_COLUMNS}""",
        [handle, data["name"], data["description"], data.get("numEmployees"), data.get("logoUrl")],
    )
    logger.info(f"Created company {handle}")
    return rows[0]


def get_multi(db: QueryExecutor, filters: Mapping[str, Any] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name, optionally filtered.

    Args:
        db: Query executor
        filters: Any of {nameLike, minEmployees, maxEmployees}

    Returns:
        Matching companies; an empty list when nothing matches
    """
    where = build_where_clause(filters or {}, FILTERS)
    return db.execute(
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            {where_sql(where)}
            ORDER BY name""",
        where.values,
    )


def get(db: QueryExecutor, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company with its jobs.

    Returns:
        {handle, name, description, numEmployees, logoUrl, jobs}
        where jobs is [{id, title, salary, equity}, ...] ordered by id

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = db.execute(
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            WHERE handle = $1""",
        [handle],
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")

    company = rows[0]
    company["jobs"] = db.execute(
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle],
    )
    return company


def update(db: QueryExecutor, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the supplied fields change.

    Args:
        data: Any of {name, description, numEmployees, logoUrl}

    Raises:
        EmptyUpdateError: If data is empty
        DuplicateKeyError: If another company already has the new name
        NotFoundError: If no company has this handle
    """
    if "name" in data:
        _check_name_free(db, data["name"], exclude_handle=handle)

    set_clause = build_set_clause(data, JS_TO_SQL)
    handle_idx = len(set_clause.values) + 1

    rows = db.execute(
        f"""UPDATE companies
            SET {set_clause.clause}
            WHERE handle = ${handle_idx}
            RETURNING {COMPANY_COLUMNS}""",
        [*set_clause.values, handle],
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return rows[0]


def remove(db: QueryExecutor, handle: str) -> None:
    """
    Delete a company.

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = db.execute("DELETE FROM companies WHERE handle = $1 RETURNING handle", [handle])
    if not rows:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Deleted company {handle}")
