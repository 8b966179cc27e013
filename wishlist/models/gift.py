"""Gift model - one item on a user's wishlist."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wishlist.models.base import BaseModel


class Gift(BaseModel):
    """Wishlist item owned by exactly one user.

    ``is_taken`` mirrors whether a claim exists for the gift. ``version`` is
    bumped on every UPDATE so concurrent writers lose at flush time instead
    of silently overwriting each other.
    """

    __tablename__ = "gifts"

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_taken: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Owner
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Gift {self.title} (user_id={self.user_id}, taken={self.is_taken})>"
