"""
CRUD operations for jobs.

Jobs are keyed by their numeric id and always belong to an existing company.
"""

import logging
from typing import Any, Dict, List, Mapping

from app.core.database import QueryExecutor
from app.core.errors import BadRequestError, NotFoundError
from app.core.sql import (
    FilterRule,
    build_set_clause,
    build_where_clause,
    contains_pattern,
    positive_threshold,
    where_sql,
)

logger = logging.getLogger(__name__)

# Supported search filters. hasEquity=true becomes "equity > 0"; false drops it.
FILTERS = {
    "titleLike": FilterRule("lower(title) LIKE lower({})", contains_pattern),
    "minSalary": FilterRule("salary >= {}"),
    "hasEquity": FilterRule("equity > {}", positive_threshold),
}

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'


def create(db: QueryExecutor, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a job.

    Args:
        db: Query executor
        data: {title, salary, equity, companyHandle}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        BadRequestError: If companyHandle does not name a company
    """
    company_handle = data["companyHandle"]
    company = db.execute("SELECT handle FROM companies WHERE handle = $1", [company_handle])
    if not company:
        raise BadRequestError(f"No company: {company_handle}")

    rows = db.execute(
        f"""INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
        [data["title"], data.get("salary"), data.get("equity"), company_handle],
    )
    job = rows[0]
    logger.info(f"Created job {job['id']}: {job['title']} at {company_handle}")
    return job


def get_multi(db: QueryExecutor, filters: Mapping[str, Any] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title, optionally filtered.

    Args:
        db: Query executor
        filters: Any of {titleLike, minSalary, hasEquity}

    Returns:
        Matching jobs; an empty list when nothing matches
    """
    where = build_where_clause(filters or {}, FILTERS)
    return db.execute(
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            {where_sql(where)}
            ORDER BY title, id""",
        where.values,
    )


def get_by_id(db: QueryExecutor, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job by its ID.

    Raises:
        NotFoundError: If no job has this id
    """
    rows = db.execute(f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1", [job_id])
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    return rows[0]


def update(db: QueryExecutor, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Args:
        data: Any of {title, salary, equity}

    Raises:
        EmptyUpdateError: If data is empty
        NotFoundError: If no job has this id
    """
    set_clause = build_set_clause(data)  # title, salary and equity are also the column names
    id_idx = len(set_clause.values) + 1

    rows = db.execute(
        f"""UPDATE jobs
            SET {set_clause.clause}
            WHERE id = ${id_idx}
            RETURNING {JOB_COLUMNS}""",
        [*set_clause.values, job_id],
    )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return rows[0]


def remove(db: QueryExecutor, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If no job has this id
    """
    rows = db.execute("DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id])
    if not rows:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Deleted job {job_id}")
