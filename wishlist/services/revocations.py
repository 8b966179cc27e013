"""Durable copy of the token blacklist.

The in-memory TokenBlacklist answers every request; this table only lets
revocations survive a restart.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from wishlist.models.revoked_token import RevokedToken
from wishlist.services.token_blacklist import TokenBlacklist


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


async def persist_revocation(db: AsyncSession, jti: str, expires_at: datetime) -> None:
    """Record a revoked token. Repeated calls for the same JTI are no-ops."""
    existing = await db.get(RevokedToken, jti)
    if existing is None:
        db.add(RevokedToken(jti=jti, expires_at=expires_at))
        await db.flush()


async def load_revocations(db: AsyncSession, blacklist: TokenBlacklist) -> int:
    """Load every unexpired revocation into ``blacklist``. Returns count loaded."""
    now = datetime.now(UTC)
    result = await db.execute(select(RevokedToken).where(RevokedToken.expires_at >= now))
    count = 0
    for entry in result.scalars():
        blacklist.revoke(entry.jti, _as_utc(entry.expires_at).timestamp())
        count += 1
    return count


async def delete_expired_revocations(db: AsyncSession) -> int:
    """Remove expired rows. Returns count removed."""
    now = datetime.now(UTC)
    result: CursorResult[Any] = await db.execute(  # type: ignore[assignment]
        delete(RevokedToken)
        .where(RevokedToken.expires_at < now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
