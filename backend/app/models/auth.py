"""Authentication models for the single admin account."""

from __future__ import annotations

from pydantic import BaseModel


class AdminCredentials(BaseModel):
    email: str
    password: str


class AdminIdentity(BaseModel):
    email: str


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None
