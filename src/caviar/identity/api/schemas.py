"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterUserRequest(BaseModel):
    email: str | None = Field(None, max_length=255)
    telegram_id: int | None = None
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    username: str | None = Field(None, max_length=100)


class RequestCodeRequest(BaseModel):
    telegram_id: int


class VerifyCodeRequest(BaseModel):
    telegram_id: int
    code: str = Field(..., min_length=6, max_length=6)


class UserIdResponse(BaseModel):
    user_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class UserResponse(BaseModel):
    id: str
    email: str | None = None
    telegram_id: int | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    is_active: bool
    created_at: datetime | None = None
