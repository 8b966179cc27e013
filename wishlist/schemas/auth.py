"""Pydantic schemas for authentication API."""

from pydantic import Field

from wishlist.models.user import Role
from wishlist.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Request for account registration.

    Blank values are rejected by the service so the error carries a
    field-specific message.
    """

    name: str = Field(..., max_length=100)
    password: str = Field(..., max_length=128)


class LoginRequest(CamelModel):
    """Request for login."""

    name: str
    password: str


class LoginResponse(CamelModel):
    """Token plus the identity it was issued for."""

    token: str
    user_id: int
    name: str
    role: Role


class MeResponse(CamelModel):
    """Current user."""

    id: int
    name: str
    role: Role
