from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, Dict, Any

from portal.core.validators import require_email, require_text


class SignUpRequest(BaseModel):
    email: str
    password: str
    confirm_password: str
    full_name: str

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        v = require_text(v, "full_name")
        if len(v) < 2:
            raise ValueError("full_name must be at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return require_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise ValueError("password is required")
        if len(v) < 6:
            raise ValueError("password must be at least 6 characters")
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if not self.confirm_password:
            raise ValueError("confirm_password is required")
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class SignUpResponse(BaseModel):
    user_id: str
    email: str
    confirmation_required: bool
    message: str


class SignInRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return require_email(v)


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user_id: str
    email: str
    display_name: str


class RefreshRequest(BaseModel):
    refresh_token: str


class PasswordResetRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return require_email(v)


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: str
    user_metadata: Dict[str, Any] = {}
    created_at: Optional[Any] = None
