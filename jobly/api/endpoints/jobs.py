from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import require_admin
from jobly.crud import job as job_crud
from jobly.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobFilter,
    JobEnvelope,
    JobDetailEnvelope,
    JobListEnvelope,
    JobDeletedResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("/", status_code=201, response_model=JobEnvelope, dependencies=[Depends(require_admin)])
def create_job(request: JobCreateRequest, db: Session = Depends(get_db)):
    """
    Create a job posting for an existing company. Admin only.
    """
    return {"job": job_crud.create(db, request)}


@router.get("/", response_model=JobListEnvelope)
def list_jobs(
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    title: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """
    List jobs ordered by title.

    Args:
        minSalary: Only jobs paying at least this much
        hasEquity: If true, only jobs offering non-zero equity (false adds no constraint)
        title: Case-insensitive fragment of the job title
    """
    filters = JobFilter(min_salary=min_salary, has_equity=has_equity, title=title)
    return {"jobs": job_crud.find_all(db, filters)}


@router.get("/{job_id}", response_model=JobDetailEnvelope)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID, with its company.
    """
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope, dependencies=[Depends(require_admin)])
def update_job(job_id: int, request: JobUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a job. Admin only.

    Fields can be: title, salary, equity
    """
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return {"job": job_crud.update(db, job_id, data)}


@router.delete("/{job_id}", response_model=JobDeletedResponse, dependencies=[Depends(require_admin)])
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID. Admin only.
    """
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
