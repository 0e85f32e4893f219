from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import require_admin
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyFilter,
    CompanyEnvelope,
    CompanyDetailEnvelope,
    CompanyListEnvelope,
    CompanyDeletedResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("/", status_code=201, response_model=CompanyEnvelope, dependencies=[Depends(require_admin)])
def create_company(request: CompanyCreateRequest, db: Session = Depends(get_db)):
    """
    Create a company. Admin only.
    """
    return {"company": company_crud.create(db, request)}


@router.get("/", response_model=CompanyListEnvelope)
def list_companies(
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
    name: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """
    List companies ordered by name.

    Args:
        minEmployees: Only companies with at least this many employees
        maxEmployees: Only companies with at most this many employees
        name: Case-insensitive fragment of the company name
    """
    filters = CompanyFilter(min_employees=min_employees, max_employees=max_employees, name=name)
    return {"companies": company_crud.find_all(db, filters)}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Retrieve a company and its jobs.
    """
    return {"company": company_crud.get(db, handle)}


@router.patch("/{handle}", response_model=CompanyEnvelope, dependencies=[Depends(require_admin)])
def update_company(handle: str, request: CompanyUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a company. Admin only.

    Fields can be: name, description, numEmployees, logoUrl
    """
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return {"company": company_crud.update(db, handle, data)}


@router.delete("/{handle}", response_model=CompanyDeletedResponse, dependencies=[Depends(require_admin)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    """
    Delete a company and, by cascade, its jobs. Admin only.
    """
    company_crud.remove(db, handle)
    return {"deleted": handle}
