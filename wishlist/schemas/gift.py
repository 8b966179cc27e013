"""Pydantic schemas for gift API."""

from pydantic import Field

from wishlist.schemas.common import CamelModel


class GiftCreate(CamelModel):
    """Request to add a gift to the caller's wishlist.

    The owner is never read from the body.
    """

    title: str = Field(..., max_length=100)
    description: str | None = None
    link: str | None = None
    category: str | None = Field(None, max_length=100)


class GiftUpdate(CamelModel):
    """Partial update of an owned gift.

    Only fields present in the body are applied. The taken flag is not
    editable here and is ignored if sent.
    """

    title: str | None = Field(None, max_length=100)
    description: str | None = None
    link: str | None = None
    category: str | None = Field(None, max_length=100)


class GiftRead(CamelModel):
    """Gift as seen by any authenticated user. Carries no claimant."""

    id: int
    title: str
    description: str | None
    link: str | None
    category: str | None
    is_taken: bool
    user_id: int
