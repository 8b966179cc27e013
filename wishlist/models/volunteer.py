"""Volunteer model - a claim on a gift by another user."""

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from wishlist.models.base import BaseModel


class Volunteer(BaseModel):
    """A user's commitment to buy someone else's gift.

    At most one claim may exist per gift; the unique constraint is the
    authoritative guard when two claims race.
    """

    __tablename__ = "volunteers"

    __table_args__ = (
        UniqueConstraint("gift_id", name="uq_volunteers_gift"),
        {"sqlite_autoincrement": True},
    )

    gift_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("gifts.id", ondelete="CASCADE"),
        nullable=False,
    )
    volunteer_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Volunteer gift_id={self.gift_id} user_id={self.volunteer_user_id}>"
