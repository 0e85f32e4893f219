from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """Schema for a partial job update; id and companyHandle cannot change"""
    title: str = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class JobFilter(BaseModel):
    """Optional search constraints for listing jobs"""
    min_salary: Optional[int] = Field(None, ge=0)
    has_equity: Optional[bool] = None
    title: Optional[str] = None


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company_handle: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class JobCompany(BaseModel):
    """Company summary embedded in a job"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class JobDetail(JobResponse):
    company: Optional[JobCompany] = None


class JobEnvelope(BaseModel):
    job: JobResponse


class JobDetailEnvelope(BaseModel):
    job: JobDetail


class JobListEnvelope(BaseModel):
    jobs: List[JobResponse]


class JobDeletedResponse(BaseModel):
    deleted: int
