"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Request Schemas ---


class LoginRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "jane.doe@example.com",
                    "password": "correct horse battery staple",
                }
            ]
        }
    }

    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1)


# --- Response Schemas ---


class LoginResponse(BaseModel):
    user_id: str
    email: str
    role: str
    display_name: str | None = None
