"""Gift service - wishlist items and owner-only mutation."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from wishlist.models.gift import Gift
from wishlist.models.user import User
from wishlist.models.volunteer import Volunteer
from wishlist.services.errors import ConflictError, NotFoundError, ValidationError
from wishlist.services.policy import ensure_gift_owner
from wishlist.services.tokens import Identity

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "link", "category")


def _require_title(title: str | None) -> str:
    if not title or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()


class GiftService:
    """Service for gift CRUD.

    The owner always comes from the verified identity. Only the claim
    workflow touches ``is_taken``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, gift_id: int) -> Gift | None:
        return await self.db.get(Gift, gift_id)

    async def get_or_404(self, gift_id: int) -> Gift:
        gift = await self.get(gift_id)
        if gift is None:
            raise NotFoundError("Gift not found")
        return gift

    async def list_all(self) -> list[Gift]:
        result = await self.db.execute(select(Gift).order_by(Gift.id))
        return list(result.scalars().all())

    async def list_for_owner(self, user_id: int) -> list[Gift]:
        result = await self.db.execute(
            select(Gift).where(Gift.user_id == user_id).order_by(Gift.id)
        )
        return list(result.scalars().all())

    async def create(
        self,
        identity: Identity,
        title: str,
        description: str | None = None,
        link: str | None = None,
        category: str | None = None,
    ) -> Gift:
        """Add a gift owned by the caller.

        A token can outlive its user; such callers get NotFoundError.
        """
        if await self.db.get(User, identity.subject_id) is None:
            raise NotFoundError("User not found")

        gift = Gift(
            title=_require_title(title),
            description=description,
            link=link,
            category=category,
            is_taken=False,
            user_id=identity.subject_id,
        )
        self.db.add(gift)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Owner row deleted between the check and the insert
            await self.db.rollback()
            raise NotFoundError("User not found") from e
        await self.db.refresh(gift)
        return gift

    async def update(self, gift_id: int, identity: Identity, changes: dict) -> Gift:
        """Apply ``changes`` to an owned gift.

        Unknown keys (including ``is_taken``) are ignored. A concurrent
        writer that commits first turns this into ConflictError, or
        NotFoundError if the gift was deleted meanwhile.
        """
        gift = ensure_gift_owner(await self.get(gift_id), identity)

        if "title" in changes:
            changes = {**changes, "title": _require_title(changes["title"])}
        for field in EDITABLE_FIELDS:
            if field in changes:
                setattr(gift, field, changes[field])

        try:
            await self.db.commit()
        except StaleDataError as e:
            await self.db.rollback()
            if await self._exists(gift_id):
                raise ConflictError("Gift was modified concurrently") from e
            raise NotFoundError("Gift not found") from e
        return gift

    async def delete(self, gift_id: int, identity: Identity) -> None:
        """Delete an owned gift along with any claim on it."""
        gift = ensure_gift_owner(await self.get(gift_id), identity)

        await self.db.execute(delete(Volunteer).where(Volunteer.gift_id == gift.id))
        await self.db.delete(gift)
        try:
            await self.db.commit()
        except StaleDataError as e:
            await self.db.rollback()
            if await self._exists(gift_id):
                raise ConflictError("Gift was modified concurrently") from e
            raise NotFoundError("Gift not found") from e

    async def _exists(self, gift_id: int) -> bool:
        result = await self.db.execute(select(Gift.id).where(Gift.id == gift_id))
        return result.scalar_one_or_none() is not None
