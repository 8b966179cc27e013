"""Pydantic schemas for volunteer (claim) API."""

from wishlist.schemas.common import CamelModel
from wishlist.schemas.gift import GiftRead


class VolunteerCreate(CamelModel):
    """Request to claim a gift. The claimant is always the caller."""

    gift_id: int


class VolunteerRead(CamelModel):
    """A claim of the caller, with the claimed gift."""

    id: int
    gift_id: int
    volunteer_user_id: int
    gift: GiftRead
