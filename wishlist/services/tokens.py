"""Bearer token issuance and verification (HS256 JWT)."""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.exceptions import PyJWTError

from wishlist.core.config import ConfigurationError, JwtSettings
from wishlist.models.user import Role, User
from wishlist.services.errors import (
    InvalidTokenError,
    TokenExpiredError,
    TokenRevokedError,
)
from wishlist.services.token_blacklist import TokenBlacklist

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

REQUIRED_CLAIMS = ["sub", "name", "role", "jti", "iss", "aud", "iat", "exp"]


@dataclass(frozen=True)
class Identity:
    """Verified caller identity, produced only by TokenVerifier."""

    subject_id: int
    name: str
    role: Role
    token_id: str
    expires_at: datetime


def _signing_key(config: JwtSettings) -> str:
    if not config.key or not config.key.strip():
        logger.error("JWT key is missing or empty in configuration (Jwt:Key).")
        raise ConfigurationError("Jwt:Key configuration is required to sign tokens.", ["jwt.key"])
    return config.key


class TokenIssuer:
    """Builds signed bearer tokens carrying identity claims.

    Holds no mutable state; every call draws a fresh JTI so two tokens for
    the same user are always distinct and independently revocable.
    """

    def __init__(self, config: JwtSettings):
        self._config = config

    @property
    def lifetime(self) -> timedelta:
        return timedelta(minutes=self._config.expiration_minutes)

    def issue(self, user: User) -> str:
        """Create a signed token for ``user``."""
        key = _signing_key(self._config)
        now = datetime.now(UTC)
        payload = {
            "sub": str(user.id),
            "name": user.name,
            "role": Role(user.role).value,
            "jti": str(uuid.uuid4()),
            "iss": self._config.issuer,
            "aud": self._config.audience,
            "iat": now,
            "exp": now + self.lifetime,
        }
        token = jwt.encode(payload, key, algorithm=JWT_ALGORITHM)
        logger.debug(f"Generated token for user: {user.name} (ID: {user.id})")
        return str(token)


class TokenVerifier:
    """Validates bearer tokens and consults the blacklist.

    Checks run in order: signature, issuer/audience/time window, then
    revocation. No database access happens here.
    """

    def __init__(self, config: JwtSettings, blacklist: TokenBlacklist):
        self._config = config
        self._blacklist = blacklist

    def decode(self, token: str) -> dict[str, Any]:
        """Verify signature and registered claims, returning the payload."""
        key = _signing_key(self._config)
        try:
            return jwt.decode(
                token,
                key,
                algorithms=[JWT_ALGORITHM],
                audience=self._config.audience,
                issuer=self._config.issuer,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.ImmatureSignatureError as e:
            raise TokenExpiredError("Token is not yet valid") from e
        except PyJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

    def verify(self, token: str) -> Identity:
        """Return the verified identity for ``token`` or raise a TokenError."""
        identity = self._identity_from(self.decode(token))
        if self._blacklist.is_revoked(identity.token_id):
            raise TokenRevokedError("Token has been revoked")
        return identity

    @staticmethod
    def _identity_from(payload: dict[str, Any]) -> Identity:
        try:
            subject_id = int(payload["sub"])
            role = Role(payload["role"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Token carries an invalid subject or role") from e

        name = payload["name"]
        token_id = payload["jti"]
        if not isinstance(name, str) or not isinstance(token_id, str) or not token_id:
            raise InvalidTokenError("Token carries an invalid name or token id")

        return Identity(
            subject_id=subject_id,
            name=name,
            role=role,
            token_id=token_id,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
