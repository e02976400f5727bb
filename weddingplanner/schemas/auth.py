"""
Authentication schemas
"""

from datetime import datetime
from typing import Literal
from pydantic import BaseModel, EmailStr, Field

class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=8, max_length=200)
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    role: Literal["staff", "couple"] = "staff"

class LoginRequest(BaseModel):
    username: str
    password: str

class UserResponse(BaseModel):
    id: int
    username: str
    name: str
    email: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True
