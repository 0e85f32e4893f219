"""
Repository for jobs.

Jobs are listed by title; equity is compared against zero for the
hasEquity filter.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import run_query
from jobly.core.exceptions import ConflictError, NotFoundError
from jobly.core.sql import JOB_COLUMNS, job_filters, sql_for_partial_update
from jobly.schemas.job import JobCreateRequest, JobFilter

logger = logging.getLogger(__name__)

JOB_FIELDS = 'id, title, salary, equity, company_handle AS "companyHandle"'


def create(db: Session, data: JobCreateRequest) -> Dict[str, Any]:
    """
    Create a job for an existing company.

    Raises:
        ConflictError: If a job with the same title exists
        NotFoundError: If the company does not exist
    """
    duplicate = run_query(
        db,
        "SELECT title FROM jobs WHERE title = $1",
        [data.title]
    ).first()
    if duplicate:
        raise ConflictError("job", data.title)

    company = run_query(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [data.company_handle]
    ).first()
    if not company:
        raise NotFoundError("company", data.company_handle)

    try:
        row = run_query(
            db,
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {JOB_FIELDS}""",
            [data.title, data.salary, data.equity, data.company_handle]
        ).mappings().first()
    except IntegrityError as e:
        # The company was deleted after the check above
        db.rollback()
        logger.warning(f"Integrity error creating job {data.title}: {e}")
        raise NotFoundError("company", data.company_handle)
    db.commit()

    logger.info(f"Created job {row['id']}: {data.title} at {data.company_handle}")
    return dict(row)


def find_all(db: Session, filters: Optional[JobFilter] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title, optionally filtered by minimum salary,
    non-zero equity and a case-insensitive title fragment.
    """
    where = job_filters(filters)
    sql = f"SELECT {JOB_FIELDS} FROM jobs{where.render()} ORDER BY title"
    rows = run_query(db, sql, where.values).mappings().all()
    return [dict(row) for row in rows]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Get a job with a summary of its company.

    Raises:
        NotFoundError: If no such job
    """
    row = run_query(
        db,
        f"SELECT {JOB_FIELDS} FROM jobs WHERE id = $1",
        [job_id]
    ).mappings().first()
    if not row:
        raise NotFoundError("job", job_id)

    job = dict(row)
    company = run_query(
        db,
        """SELECT handle,
                  name,
                  description,
                  num_employees AS "numEmployees",
                  logo_url AS "logoUrl"
           FROM companies
           WHERE handle = $1""",
        [job["companyHandle"]]
    ).mappings().first()
    job["company"] = dict(company) if company else None
    return job


def update(db: Session, job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job; only the given fields change.

    Args:
        data: camelCase field -> value, any of title, salary, equity

    Raises:
        ValidationError: If data is empty
        NotFoundError: If no such job
    """
    update_sql = sql_for_partial_update(data, JOB_COLUMNS)
    row = run_query(
        db,
        f"""UPDATE jobs
            SET {update_sql.set_cols}
            WHERE id = {update_sql.next_placeholder}
            RETURNING {JOB_FIELDS}""",
        [*update_sql.values, job_id]
    ).mappings().first()
    if not row:
        db.rollback()
        raise NotFoundError("job", job_id)

    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return dict(row)


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job (its applications cascade).

    Raises:
        NotFoundError: If no such job
    """
    row = run_query(
        db,
        "DELETE FROM jobs WHERE id = $1 RETURNING id",
        [job_id]
    ).first()
    if not row:
        db.rollback()
        raise NotFoundError("job", job_id)

    db.commit()
    logger.info(f"Deleted job {job_id}")
