"""
Repository for companies.

Rows are returned as dicts keyed by the external camelCase field names.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import run_query
from jobly.core.exceptions import ConflictError, NotFoundError
from jobly.core.sql import COMPANY_COLUMNS, company_filters, sql_for_partial_update
from jobly.schemas.company import CompanyCreateRequest, CompanyFilter

logger = logging.getLogger(__name__)

COMPANY_FIELDS = (
    'handle, name, description, '
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)


def create(db: Session, data: CompanyCreateRequest) -> Dict[str, Any]:
    """
    Create a company.

    Raises:
        ConflictError: If the handle or the name is already taken
    """
    duplicate = run_query(
        db,
        "SELECT handle FROM companies WHERE handle = $1 OR name = $2",
        [data.handle, data.name]
    ).first()
    if duplicate:
        raise ConflictError("company", data.handle if duplicate[0] == data.handle else data.name)

    try:
        row = run_query(
            db,
            f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COMPANY_FIELDS}""",
            [data.handle, data.name, data.description, data.num_employees, data.logo_url]
        ).mappings().first()
    except IntegrityError as e:
        # A concurrent insert took the handle or name after the check above
        db.rollback()
        logger.warning(f"Integrity error creating company {data.handle}: {e}")
        raise ConflictError("company", data.handle)
    db.commit()

    logger.info(f"Created company {data.handle}")
    return dict(row)


def find_all(db: Session, filters: Optional[CompanyFilter] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name, optionally filtered by employee count
    range and a case-insensitive name fragment.

    Raises:
        ValidationError: If minEmployees > maxEmployees
    """
    where = company_filters(filters)
    sql = f"SELECT {COMPANY_FIELDS} FROM companies{where.render()} ORDER BY name"
    rows = run_query(db, sql, where.values).mappings().all()
    return [dict(row) for row in rows]


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Get a company with its jobs.

    Raises:
        NotFoundError: If no such company
    """
    row = run_query(
        db,
        f"SELECT {COMPANY_FIELDS} FROM companies WHERE handle = $1",
        [handle]
    ).mappings().first()
    if not row:
        raise NotFoundError("company", handle)

    company = dict(row)
    jobs = run_query(
        db,
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle]
    ).mappings().all()
    company["jobs"] = [dict(j) for j in jobs]
    return company


def update(db: Session, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the given fields change.

    Args:
        data: camelCase field -> value, any of name, description, numEmployees, logoUrl

    Raises:
        ValidationError: If data is empty
        NotFoundError: If no such company
        ConflictError: If the new name belongs to another company
    """
    update_sql = sql_for_partial_update(data, COMPANY_COLUMNS)
    try:
        row = run_query(
            db,
            f"""UPDATE companies
                SET {update_sql.set_cols}
                WHERE handle = {update_sql.next_placeholder}
                RETURNING {COMPANY_FIELDS}""",
            [*update_sql.values, handle]
        ).mappings().first()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error updating company {handle}: {e}")
        raise ConflictError("company", data.get("name", handle))
    if not row:
        db.rollback()
        raise NotFoundError("company", handle)

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return dict(row)


def remove(db: Session, handle: str) -> None:
    """
    Delete a company (its jobs and their applications cascade).

    Raises:
        NotFoundError: If no such company
    """
    row = run_query(
        db,
        "DELETE FROM companies WHERE handle = $1 RETURNING handle",
        [handle]
    ).first()
    if not row:
        db.rollback()
        raise NotFoundError("company", handle)

    db.commit()
    logger.info(f"Deleted company {handle}")
