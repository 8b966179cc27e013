"""Authentication service: registration, login and password hashing."""

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wishlist.models.user import Role, User
from wishlist.services.errors import (
    DuplicateNameError,
    InvalidCredentialsError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Argon2 password hasher with recommended parameters
# Memory: 64 MiB, Time: 3 iterations, Parallelism: 4
ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)

# Verified against when the name is unknown so both failure paths cost the same
_DUMMY_HASH = ph.hash("wishlist-dummy-password")


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison."""
    try:
        ph.verify(password_hash, password)
        return True
    except (VerifyMismatchError, InvalidHashError):
        return False


def _require_fields(name: str | None, password: str | None) -> tuple[str, str]:
    if not name or not name.strip():
        raise ValidationError("Name is required")
    if not password or not password.strip():
        raise ValidationError("Password is required")
    return name.strip(), password


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_by_name(self, name: str) -> User | None:
        """Get user by name."""
        result = await self.session.execute(select(User).where(User.name == name))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: int) -> User | None:
        """Get user by ID."""
        return await self.session.get(User, user_id)

    async def register(self, name: str, password: str, role: Role = Role.USER) -> User:
        """Create a new account.

        Raises ValidationError for blank fields and DuplicateNameError when
        the name is taken, including when a concurrent registration wins.
        """
        name, password = _require_fields(name, password)

        if await self.get_user_by_name(name) is not None:
            raise DuplicateNameError("User already exists")

        user = User(name=name, password_hash=hash_password(password), role=role)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateNameError("User already exists") from e
        await self.session.refresh(user)

        logger.info(f"Registered user: {name} (ID: {user.id})")
        return user

    async def authenticate(self, name: str, password: str) -> User:
        """Authenticate a user and return the user object.

        Raises InvalidCredentialsError for both "user not found" and
        "wrong password" to prevent user enumeration.
        """
        name, password = _require_fields(name, password)
        user = await self.get_user_by_name(name)

        if user is None:
            # Perform a dummy verification to prevent timing attacks
            verify_password(password, _DUMMY_HASH)
            raise InvalidCredentialsError("Invalid credentials")

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials")

        return user

    async def ensure_admin(self, name: str, password: str) -> User | None:
        """Create the bootstrap administrator if no user has that name.

        Returns the created user, or None when the name already exists.
        """
        if await self.get_user_by_name(name) is not None:
            return None
        user = await self.register(name, password, role=Role.ADMIN)
        logger.info(f"Created bootstrap admin user: {name}")
        return user
