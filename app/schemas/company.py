"""
Pydantic schemas for companies.
"""

import re
from typing import List, Optional
from pydantic import Field, field_validator

from app.schemas.base import CamelModel, RequestModel, reject_null

_URL_RE = re.compile(r"^https?://\S+$")


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is not None and not _URL_RE.match(value):
        raise ValueError("must be an http(s) URL")
    return value


class CompanyCreateRequest(RequestModel):
    """Schema for creating a company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    @field_validator("logo_url")
    @classmethod
    def validate_logo_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class CompanyUpdateRequest(RequestModel):
    """Schema for a partial company update; the handle cannot change"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    @field_validator("name", "description")
    @classmethod
    def validate_not_null(cls, v: Optional[str]) -> str:
        return reject_null(v)

    @field_validator("logo_url")
    @classmethod
    def validate_logo_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class CompanyResponse(CamelModel):
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyJob(CamelModel):
    """A job as listed under its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None


class CompanyDetailResponse(CompanyResponse):
    jobs: List[CompanyJob] = []


class CompanyEnvelope(CamelModel):
    company: CompanyResponse


class CompanyDetailEnvelope(CamelModel):
    company: CompanyDetailResponse


class CompanyListEnvelope(CamelModel):
    companies: List[CompanyResponse]


class CompanyDeletedResponse(CamelModel):
    deleted: str
