"""Schemas for the login endpoint."""

from typing import List

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., examples=["admin"])
    password: str = Field(..., examples=["p"])


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    roles: List[str] = []
