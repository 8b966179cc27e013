"""Volunteer service - claiming and releasing gifts."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from wishlist.models.gift import Gift
from wishlist.models.user import User
from wishlist.models.volunteer import Volunteer
from wishlist.services.errors import ConflictError, NotFoundError, ValidationError
from wishlist.services.policy import ensure_claimant
from wishlist.services.tokens import Identity

logger = logging.getLogger(__name__)


class VolunteerService:
    """Service for gift claims.

    A claim and the gift's ``is_taken`` flag are always written in the same
    transaction. The taken-flag check up front is only a fast path: the
    unique constraint on ``volunteers.gift_id`` and the gift's version
    counter decide the winner when two claims race.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_claimant(self, identity: Identity) -> list[tuple[Volunteer, Gift]]:
        """Claims made by the caller, each with its gift."""
        result = await self.db.execute(
            select(Volunteer, Gift)
            .join(Gift, Gift.id == Volunteer.gift_id)
            .where(Volunteer.volunteer_user_id == identity.subject_id)
            .order_by(Volunteer.id)
        )
        return [(claim, gift) for claim, gift in result.all()]

    async def get_own(self, claim_id: int, identity: Identity) -> tuple[Volunteer, Gift]:
        """A single claim of the caller. Other users' claims do not exist."""
        claim = ensure_claimant(await self.db.get(Volunteer, claim_id), identity)
        gift = await self.db.get(Gift, claim.gift_id)
        if gift is None:
            raise NotFoundError("Claim not found")
        return claim, gift

    async def claim(self, gift_id: int, identity: Identity) -> tuple[Volunteer, Gift]:
        """Claim an untaken gift owned by someone else.

        Losing a race at commit is ConflictError while the gift still exists,
        and NotFoundError once it has been deleted.
        """
        gift = await self.db.get(Gift, gift_id)
        if gift is None:
            raise NotFoundError("Gift not found")
        if gift.user_id == identity.subject_id:
            raise ValidationError("You cannot claim your own gift")
        if gift.is_taken:
            raise ConflictError("This gift has already been claimed")
        if await self.db.get(User, identity.subject_id) is None:
            raise NotFoundError("User not found")

        claim = Volunteer(gift_id=gift.id, volunteer_user_id=identity.subject_id)
        gift.is_taken = True
        self.db.add(claim)
        try:
            await self.db.commit()
        except (IntegrityError, StaleDataError) as e:
            await self.db.rollback()
            if not await self._gift_exists(gift_id):
                raise NotFoundError("Gift not found") from e
            logger.info(f"Claim conflict on gift {gift_id} for user {identity.subject_id}")
            raise ConflictError("This gift has already been claimed") from e

        await self.db.refresh(claim)
        return claim, gift

    async def release(self, claim_id: int, identity: Identity) -> None:
        """Delete the caller's claim and mark the gift claimable again."""
        claim = ensure_claimant(await self.db.get(Volunteer, claim_id), identity)
        gift_id = claim.gift_id
        gift = await self.db.get(Gift, gift_id)

        await self.db.delete(claim)
        if gift is not None:
            gift.is_taken = False
        try:
            await self.db.commit()
        except StaleDataError as e:
            await self.db.rollback()
            if not await self._gift_exists(gift_id):
                raise NotFoundError("Claim not found") from e
            raise ConflictError("Gift was modified concurrently, retry the request") from e

    async def _gift_exists(self, gift_id: int) -> bool:
        result = await self.db.execute(select(Gift.id).where(Gift.id == gift_id))
        return result.scalar_one_or_none() is not None
