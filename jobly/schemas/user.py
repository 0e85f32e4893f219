"""
Pydantic schemas for users, authentication and applications.
"""

from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class UserRegisterRequest(BaseModel):
    """Request schema for self-registration (never grants admin)."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)  # bcrypt limit
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admins adding a user, who may be an admin."""
    is_admin: bool = False


class UserUpdateRequest(BaseModel):
    """Partial update; username and isAdmin cannot be changed here."""
    password: str = Field(None, min_length=5, max_length=72)
    first_name: str = Field(None, min_length=1, max_length=30)
    last_name: str = Field(None, min_length=1, max_length=30)
    email: EmailStr = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class UserLoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    token: str


class UserResponse(BaseModel):
    """User profile response (no password)."""
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ApplicationResponse(BaseModel):
    job_id: int
    state: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserDetail(UserResponse):
    applications: List[ApplicationResponse] = []


class UserEnvelope(BaseModel):
    user: UserResponse


class UserDetailEnvelope(BaseModel):
    user: UserDetail


class UserCreatedEnvelope(BaseModel):
    user: UserResponse
    token: str


class UserListEnvelope(BaseModel):
    users: List[UserResponse]


class UserDeletedResponse(BaseModel):
    deleted: str


class AppliedResponse(BaseModel):
    applied: int
    state: str
