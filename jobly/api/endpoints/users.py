"""
User endpoints.

Listing and creating users is admin only. Reading, updating, deleting a user
and managing their applications is allowed to admins and to the user
themselves.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import require_admin, require_admin_or_self
from jobly.core.security import create_access_token
from jobly.crud import user as user_crud
from jobly.schemas.user import (
    UserCreateRequest,
    UserUpdateRequest,
    UserEnvelope,
    UserDetailEnvelope,
    UserCreatedEnvelope,
    UserListEnvelope,
    UserDeletedResponse,
    AppliedResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/", status_code=201, response_model=UserCreatedEnvelope, dependencies=[Depends(require_admin)])
def create_user(request: UserCreateRequest, db: Session = Depends(get_db)):
    """
    Add a user, possibly an admin. This is not the registration endpoint.

    Returns the new user and a token for them.
    """
    user = user_crud.register(db, request)
    token = create_access_token(user["username"], user["isAdmin"])
    return {"user": user, "token": token}


@router.get("/", response_model=UserListEnvelope, dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    """List all users ordered by username."""
    return {"users": user_crud.find_all(db)}


@router.get("/{username}", response_model=UserDetailEnvelope, dependencies=[Depends(require_admin_or_self)])
def get_user(username: str, db: Session = Depends(get_db)):
    """Retrieve a user and their job applications."""
    return {"user": user_crud.get(db, username)}


@router.patch("/{username}", response_model=UserEnvelope, dependencies=[Depends(require_admin_or_self)])
def update_user(username: str, request: UserUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a user.

    Fields can be: firstName, lastName, password, email
    """
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return {"user": user_crud.update(db, username, data)}


@router.delete("/{username}", response_model=UserDeletedResponse, dependencies=[Depends(require_admin_or_self)])
def delete_user(username: str, db: Session = Depends(get_db)):
    """Delete a user and, by cascade, their applications."""
    user_crud.remove(db, username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", response_model=AppliedResponse, dependencies=[Depends(require_admin_or_self)])
def apply_for_job(username: str, job_id: int, db: Session = Depends(get_db)):
    """Apply for a job with the default "applied" state."""
    stored = user_crud.apply(db, username, job_id)
    return {"applied": job_id, "state": stored.value}


@router.post("/{username}/jobs/{job_id}/{state}", response_model=AppliedResponse, dependencies=[Depends(require_admin_or_self)])
def apply_for_job_with_state(username: str, job_id: int, state: str, db: Session = Depends(get_db)):
    """
    Apply for a job in the given state.

    States: applied, interested, accepted, rejected
    """
    stored = user_crud.apply(db, username, job_id, state)
    return {"applied": job_id, "state": stored.value}


@router.patch("/{username}/jobs/{job_id}", response_model=AppliedResponse, dependencies=[Depends(require_admin_or_self)])
def reset_application(username: str, job_id: int, db: Session = Depends(get_db)):
    """Set an application back to "applied"."""
    stored = user_crud.update_application_status(db, username, job_id)
    return {"applied": job_id, "state": stored.value}


@router.patch("/{username}/jobs/{job_id}/{state}", response_model=AppliedResponse, dependencies=[Depends(require_admin_or_self)])
def update_application(username: str, job_id: int, state: str, db: Session = Depends(get_db)):
    """Change the state of an application, creating it if needed."""
    stored = user_crud.update_application_status(db, username, job_id, state)
    return {"applied": job_id, "state": stored.value}
