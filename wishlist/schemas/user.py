"""Pydantic schemas for user API."""

from pydantic import Field

from wishlist.models.user import Role
from wishlist.schemas.common import CamelModel
from wishlist.schemas.gift import GiftRead


class UserRead(CamelModel):
    """Public view of a user."""

    id: int
    name: str


class UserAdminRead(UserRead):
    """User view returned to administrators."""

    role: Role


class UserUpdate(CamelModel):
    """Admin update of a user's name and/or role."""

    name: str | None = Field(None, max_length=100)
    role: Role | None = None


class WishlistRead(UserRead):
    """A user with their gifts (taken flag only)."""

    gifts: list[GiftRead] = Field(default_factory=list)
