from typing import Optional
from fastapi import APIRouter, Depends, Query

from app.core.database import QueryExecutor, get_executor
from app.core.deps import ensure_admin
from app.core.errors import BadRequestError
from app.crud import company as company_crud
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyEnvelope,
    CompanyDetailEnvelope,
    CompanyListEnvelope,
    CompanyDeletedResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", status_code=201, response_model=CompanyEnvelope, dependencies=[Depends(ensure_admin)])
def create_company(
    request: CompanyCreateRequest,
    db: QueryExecutor = Depends(get_executor)
):
    """
    Create a company.

    Authorization required: admin
    """
    company = company_crud.create(db, request.model_dump(by_alias=True))
    return {"company": company}


@router.get("", response_model=CompanyListEnvelope)
def list_companies(
    name_like: Optional[str] = Query(None, alias="nameLike", min_length=1),
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
    db: QueryExecutor = Depends(get_executor)
):
    """
    List companies ordered by name.

    Optional filters:
    - nameLike: case-insensitive partial match on name
    - minEmployees / maxEmployees: inclusive bounds on headcount
    """
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError("Maximum Employees must be greater than minimum employees")

    filters = {
        "nameLike": name_like,
        "minEmployees": min_employees,
        "maxEmployees": max_employees,
    }
    companies = company_crud.get_multi(db, filters)
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: QueryExecutor = Depends(get_executor)):
    """Retrieve a company and its jobs."""
    company = company_crud.get(db, handle)
    return {"company": company}


@router.patch("/{handle}", response_model=CompanyEnvelope, dependencies=[Depends(ensure_admin)])
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: QueryExecutor = Depends(get_executor)
):
    """
    Partially update a company: { name, description, numEmployees, logoUrl }.

    Authorization required: admin
    """
    company = company_crud.update(db, handle, request.model_dump(exclude_unset=True, by_alias=True))
    return {"company": company}


@router.delete("/{handle}", response_model=CompanyDeletedResponse, dependencies=[Depends(ensure_admin)])
def delete_company(handle: str, db: QueryExecutor = Depends(get_executor)):
    """
    Delete a company.

    Authorization required: admin
    """
    company_crud.remove(db, handle)
    return {"deleted": handle}
