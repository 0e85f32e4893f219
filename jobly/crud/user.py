"""
Repository for users and their job applications.

Passwords are stored as bcrypt hashes and never returned. An application is
one row per (username, job_id); applying again or updating the status
rewrites the state of that same row.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import run_query
from jobly.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from jobly.core.security import get_password_hash, verify_password
from jobly.core.sql import USER_COLUMNS, sql_for_partial_update
from jobly.models.application import ApplicationState, resolve_application_state
from jobly.schemas.user import UserRegisterRequest

logger = logging.getLogger(__name__)

USER_FIELDS = (
    'username, first_name AS "firstName", last_name AS "lastName", '
    'email, is_admin AS "isAdmin"'
)


def register(db: Session, data: UserRegisterRequest) -> Dict[str, Any]:
    """
    Create a user with a hashed password.

    Accepts UserCreateRequest too; isAdmin defaults to False.

    Raises:
        ConflictError: If the username is taken
    """
    duplicate = run_query(
        db,
        "SELECT username FROM users WHERE username = $1",
        [data.username]
    ).first()
    if duplicate:
        raise ConflictError("username", data.username)

    try:
        row = run_query(
            db,
            f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {USER_FIELDS}""",
            [
                data.username,
                get_password_hash(data.password),
                data.first_name,
                data.last_name,
                data.email,
                getattr(data, "is_admin", False),
            ]
        ).mappings().first()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error registering {data.username}: {e}")
        raise ConflictError("username", data.username)
    db.commit()

    logger.info(f"Registered user {data.username}")
    return dict(row)


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Raises:
        UnauthorizedError: If the user is unknown or the password is wrong
    """
    row = run_query(
        db,
        f"SELECT {USER_FIELDS}, password FROM users WHERE username = $1",
        [username]
    ).mappings().first()

    if row and verify_password(password, row["password"]):
        user = dict(row)
        del user["password"]
        return user

    logger.warning(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


def find_all(db: Session) -> List[Dict[str, Any]]:
    """List all users ordered by username."""
    rows = run_query(
        db,
        f"SELECT {USER_FIELDS} FROM users ORDER BY username"
    ).mappings().all()
    return [dict(row) for row in rows]


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Get a user with their applications.

    Raises:
        NotFoundError: If no such user
    """
    row = run_query(
        db,
        f"SELECT {USER_FIELDS} FROM users WHERE username = $1",
        [username]
    ).mappings().first()
    if not row:
        raise NotFoundError("user", username)

    user = dict(row)
    applications = run_query(
        db,
        """SELECT job_id AS "jobId", state
           FROM applications
           WHERE username = $1
           ORDER BY job_id""",
        [username]
    ).mappings().all()
    user["applications"] = [dict(a) for a in applications]
    return user


def update(db: Session, username: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user; a new password is hashed before storing.

    Args:
        data: camelCase field -> value, any of firstName, lastName, password, email

    Raises:
        ValidationError: If data is empty
        NotFoundError: If no such user
    """
    data = dict(data)
    if data.get("password"):
        data["password"] = get_password_hash(data["password"])

    update_sql = sql_for_partial_update(data, USER_COLUMNS)
    row = run_query(
        db,
        f"""UPDATE users
            SET {update_sql.set_cols}
            WHERE username = {update_sql.next_placeholder}
            RETURNING {USER_FIELDS}""",
        [*update_sql.values, username]
    ).mappings().first()
    if not row:
        db.rollback()
        raise NotFoundError("user", username)

    db.commit()
    logger.info(f"Updated user {username}: {', '.join(data)}")
    return dict(row)


def remove(db: Session, username: str) -> None:
    """
    Delete a user (their applications cascade).

    Raises:
        NotFoundError: If no such user
    """
    row = run_query(
        db,
        "DELETE FROM users WHERE username = $1 RETURNING username",
        [username]
    ).first()
    if not row:
        db.rollback()
        raise NotFoundError("user", username)

    db.commit()
    logger.info(f"Deleted user {username}")


def _set_application_state(db: Session, username: str, job_id: int, state: ApplicationState) -> ApplicationState:
    if not run_query(db, "SELECT username FROM users WHERE username = $1", [username]).first():
        raise NotFoundError("user", username)
    if not run_query(db, "SELECT id FROM jobs WHERE id = $1", [job_id]).first():
        raise NotFoundError("job", job_id)

    row = run_query(
        db,
        """INSERT INTO applications (username, job_id, state)
           VALUES ($1, $2, $3)
           ON CONFLICT (username, job_id) DO UPDATE SET state = excluded.state
           RETURNING state""",
        [username, job_id, state.value]
    ).first()
    db.commit()

    return ApplicationState(row[0])


def apply(
    db: Session,
    username: str,
    job_id: int,
    state: Optional[Union[str, ApplicationState]] = None
) -> ApplicationState:
    """
    Record that a user applied for a job.

    Args:
        state: Application state, "applied" when omitted

    Returns:
        The stored state

    Raises:
        ValidationError: If state is not a known application state
        NotFoundError: If the user or job does not exist
    """
    resolved = resolve_application_state(state)
    stored = _set_application_state(db, username, job_id, resolved)
    logger.info(f"User {username} applied for job {job_id} ({stored.value})")
    return stored


def update_application_status(
    db: Session,
    username: str,
    job_id: int,
    state: Optional[Union[str, ApplicationState]] = None
) -> ApplicationState:
    """
    Set the state of a user's application, creating it if needed.

    Same validation and errors as apply(); setting the current state again
    is not an error.
    """
    resolved = resolve_application_state(state)
    stored = _set_application_state(db, username, job_id, resolved)
    logger.info(f"Application of {username} for job {job_id} set to {stored.value}")
    return stored
