"""Revoked bearer tokens - survives process restarts."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from wishlist.core.database import Base


class RevokedToken(Base):
    """A logged-out token identified by its JTI claim.

    Entries are created on logout and deleted once the token would have
    expired anyway.
    """

    __tablename__ = "revoked_tokens"

    jti: Mapped[str] = mapped_column(String(64), primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
