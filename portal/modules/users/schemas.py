from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime

from portal.core.validators import require_text


class UserCreate(BaseModel):
    name: str
    email: EmailStr

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return require_text(v, "name")


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    auth_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserCreateResponse(BaseModel):
    user: UserResponse
    created: bool
    message: str
