"""User service - directory reads and admin-only mutation."""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wishlist.models.gift import Gift
from wishlist.models.user import Role, User
from wishlist.models.volunteer import Volunteer
from wishlist.services.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from wishlist.services.policy import can_administer, require_admin
from wishlist.services.tokens import Identity

logger = logging.getLogger(__name__)


class UserService:
    """Service for user management."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def get_or_404(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update(
        self,
        user_id: int,
        identity: Identity,
        name: str | None = None,
        role: Role | None = None,
    ) -> User:
        """Rename a user or change their role (admin only)."""
        await self._require_stored_admin(identity)
        user = await self.get_or_404(user_id)

        if name is not None:
            if not name.strip():
                raise ValidationError("Name must not be blank")
            user.name = name.strip()
        if role is not None:
            user.role = role

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("A user with that name already exists") from e
        await self.db.refresh(user)

        logger.info(f"User {user_id} updated by admin {identity.subject_id}")
        return user

    async def delete(self, user_id: int, identity: Identity) -> None:
        """Delete a user with their gifts and claims (admin only).

        Gifts the user had claimed become claimable again.
        """
        await self._require_stored_admin(identity)
        user = await self.get_or_404(user_id)

        claimed_gift_ids = select(Volunteer.gift_id).where(
            Volunteer.volunteer_user_id == user_id
        )
        own_gift_ids = select(Gift.id).where(Gift.user_id == user_id)

        await self.db.execute(
            update(Gift)
            .where(Gift.id.in_(claimed_gift_ids))
            .values(is_taken=False, version=Gift.version + 1)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            delete(Volunteer)
            .where(
                (Volunteer.volunteer_user_id == user_id) | (Volunteer.gift_id.in_(own_gift_ids))
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            delete(Gift).where(Gift.user_id == user_id).execution_options(synchronize_session=False)
        )
        await self.db.delete(user)
        await self.db.commit()

        logger.info(f"User {user_id} deleted by admin {identity.subject_id}")

    async def _require_stored_admin(self, identity: Identity) -> None:
        """Tokens keep their role claim until expiry; mutation goes by the stored role."""
        require_admin(identity)
        actor = await self.db.get(User, identity.subject_id)
        if actor is None or not can_administer(actor.role):
            raise AuthorizationError("Administrator role required")
