"""
DogAdopt Backend — Auth Request/Response Schemas
==================================================

Request fields are optional at the schema level on purpose: a missing
username or password must produce the API's own 400 "required" message
from AuthService rather than a generic schema error.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Body of POST /api/auth/register and POST /api/auth/login."""

    username: Optional[str] = Field(default=None, examples=["sarah_loves_dogs"])
    password: Optional[str] = Field(default=None, examples=["password123"])


class UserPublic(BaseModel):
    """Public fields of a user. The password hash is never serialized."""

    id: uuid.UUID
    username: str

    model_config = {"from_attributes": True}


class AuthPayload(BaseModel):
    """`data` of a successful register or login."""

    token: str = Field(description="Bearer token, valid for 24 hours")
    user: UserPublic
