from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from taskflow.models import TaskStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Users

class UserBase(BaseModel):
    username: str
    email: EmailStr


class UserCreate(UserBase):
    password: str

    @field_validator("username")
    @classmethod
    def username_validator(cls, v):
        v = v.strip()
        if len(v) < 3 or len(v) > 50:
            raise ValueError("Username must be between 3 and 50 characters")
        return v

    @field_validator("password")
    @classmethod
    def password_validator(cls, v):
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        # bcrypt only looks at the first 72 bytes
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class User(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class AuthResponse(BaseModel):
    message: str
    user: User
    token: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# Tasks

def _clean_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title cannot be empty")
    if len(v) > 255:
        raise ValueError("Title must be at most 255 characters")
    return v


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO

    @field_validator("title")
    @classmethod
    def title_validator(cls, v):
        return _clean_title(v)


class TaskUpdate(BaseModel):
    """Partial update; owner fields in the body are ignored."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None

    @field_validator("title")
    @classmethod
    def title_validator(cls, v):
        if v is None:
            raise ValueError("Title cannot be null")
        return _clean_title(v)

    @field_validator("status")
    @classmethod
    def status_validator(cls, v):
        if v is None:
            raise ValueError("Status cannot be null")
        return v


class Task(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    owner_id: int
    created_at: datetime
    updated_at: datetime


class TaskResponse(BaseModel):
    message: str
    task: Task


class TaskUpdateResponse(CamelModel):
    message: str
    updated_task: Task


class TaskPage(CamelModel):
    message: str
    total_items: int
    total_pages: int
    current_page: int
    page_size: int
    tasks: List[Task]
