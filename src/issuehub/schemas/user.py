"""Pydantic schemas for signup, login, and user output.

Learn: Input schemas accept plain strings with empty defaults; the
validation module decides what is missing or malformed so every
failure is a uniform 400. Output schemas never include password_hash.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel


class SignupRequest(BaseModel):
    email: str = ""
    name: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserRead(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserRead
