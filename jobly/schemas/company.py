"""
Pydantic schemas for companies.

External field names are camelCase; request models forbid unknown fields,
which is what keeps arbitrary identifiers out of the SQL builders.
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal


class CompanyCreateRequest(BaseModel):
    """Schema for creating a company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class CompanyUpdateRequest(BaseModel):
    """Schema for a partial company update; the handle cannot change"""
    name: str = Field(None, min_length=1)
    description: str = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class CompanyFilter(BaseModel):
    """Optional search constraints for listing companies"""
    min_employees: Optional[int] = Field(None, ge=0)
    max_employees: Optional[int] = Field(None, ge=0)
    name: Optional[str] = None


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CompanyJob(BaseModel):
    """Job summary embedded in a company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None


class CompanyDetail(CompanyResponse):
    jobs: List[CompanyJob] = []


class CompanyEnvelope(BaseModel):
    company: CompanyResponse


class CompanyDetailEnvelope(BaseModel):
    company: CompanyDetail


class CompanyListEnvelope(BaseModel):
    companies: List[CompanyResponse]


class CompanyDeletedResponse(BaseModel):
    deleted: str
