from typing import Optional
from fastapi import APIRouter, Depends, Query

from app.core.database import QueryExecutor, get_executor
from app.core.deps import ensure_admin
from app.crud import job as job_crud
from app.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobEnvelope,
    JobListEnvelope,
    JobDeletedResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", status_code=201, response_model=JobEnvelope, dependencies=[Depends(ensure_admin)])
def create_job(
    request: JobCreateRequest,
    db: QueryExecutor = Depends(get_executor)
):
    """
    Create a job for an existing company.

    Authorization required: admin
    """
    job = job_crud.create(db, request.model_dump(by_alias=True))
    return {"job": job}


@router.get("", response_model=JobListEnvelope)
def list_jobs(
    title_like: Optional[str] = Query(None, alias="titleLike", min_length=1),
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    equity: Optional[bool] = Query(None, description="Alias of hasEquity"),
    db: QueryExecutor = Depends(get_executor)
):
    """
    List jobs ordered by title.

    Optional filters:
    - titleLike: case-insensitive partial match on title
    - minSalary: salary at least this much
    - hasEquity (or equity): true keeps only jobs offering equity; false is no filter
    """
    filters = {
        "titleLike": title_like,
        "minSalary": min_salary,
        "hasEquity": has_equity if has_equity is not None else equity,
    }
    jobs = job_crud.get_multi(db, filters)
    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(job_id: int, db: QueryExecutor = Depends(get_executor)):
    """Retrieve a job by ID."""
    job = job_crud.get_by_id(db, job_id)
    return {"job": job}


@router.patch("/{job_id}", response_model=JobEnvelope, dependencies=[Depends(ensure_admin)])
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: QueryExecutor = Depends(get_executor)
):
    """
    Partially update a job: { title, salary, equity }.

    Authorization required: admin
    """
    job = job_crud.update(db, job_id, request.model_dump(exclude_unset=True, by_alias=True))
    return {"job": job}


@router.delete("/{job_id}", response_model=JobDeletedResponse, dependencies=[Depends(ensure_admin)])
def delete_job(job_id: int, db: QueryExecutor = Depends(get_executor)):
    """
    Delete a job by ID.

    Authorization required: admin
    """
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
