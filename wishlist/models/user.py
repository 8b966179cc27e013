"""User model - a registered account (credential)."""

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from wishlist.models.base import BaseModel


class Role(str, enum.Enum):
    """Authorization role carried by every user and token."""

    USER = "user"
    ADMIN = "admin"


UserRole = Enum(
    Role,
    name="user_role",
    values_callable=lambda roles: [role.value for role in roles],
    create_constraint=True,
)


class User(BaseModel):
    """Registered user.

    The password hash is derived once at registration (argon2id) and only
    re-verified on login. Name and role change through admin updates only.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(UserRole, nullable=False, default=Role.USER)

    def __repr__(self) -> str:
        return f"<User {self.name} ({self.role.value})>"
