"""Request/response schemas for session authentication."""

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class RegisterRequest(BaseModel):
    username: str | None = None
    password: str | None = None
    # Checked only when the client sends it
    confirm_password: str | None = Field(None, alias="confirmPassword")

    model_config = {"populate_by_name": True}


class ChangePasswordRequest(BaseModel):
    old_password: str | None = None
    new_password: str | None = None
    confirm_password: str | None = None


class SessionUser(BaseModel):
    id: str
    username: str


class RegisteredUser(SessionUser):
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserResponse(BaseModel):
    user: SessionUser
