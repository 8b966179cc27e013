"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from wishlist.api.deps import (
    get_current_identity,
    get_token_blacklist,
    get_token_issuer,
    to_http_exception,
)
from wishlist.core import get_db
from wishlist.models.user import User
from wishlist.schemas.auth import LoginRequest, LoginResponse, MeResponse, RegisterRequest
from wishlist.schemas.common import MessageResponse
from wishlist.services.auth import AuthService
from wishlist.services.errors import InvalidCredentialsError, WishlistError
from wishlist.services.revocations import persist_revocation
from wishlist.services.token_blacklist import TokenBlacklist
from wishlist.services.tokens import Identity, TokenIssuer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Dependency to get auth service."""
    return AuthService(db)


def _login_response(user: User, issuer: TokenIssuer) -> LoginResponse:
    return LoginResponse(
        token=issuer.issue(user),
        user_id=user.id,
        name=user.name,
        role=user.role,
    )


@router.post("/register", response_model=LoginResponse)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> LoginResponse:
    """Create an account and return a token for it.

    Returns 400 if the name is already taken or a field is blank.
    """
    try:
        user = await auth_service.register(name=request.name, password=request.password)
    except WishlistError as e:
        raise to_http_exception(e) from e
    return _login_response(user, issuer)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> LoginResponse:
    """Authenticate and get a fresh bearer token.

    Every call issues a distinct token, so each session can be revoked on
    its own.
    """
    try:
        user = await auth_service.authenticate(name=request.name, password=request.password)
    except InvalidCredentialsError as e:
        logger.warning(f"Failed login attempt for: {request.name}")
        raise to_http_exception(e) from e
    except WishlistError as e:
        raise to_http_exception(e) from e

    logger.info(f"User logged in: {user.name}")
    return _login_response(user, issuer)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    identity: Identity = Depends(get_current_identity),
    blacklist: TokenBlacklist = Depends(get_token_blacklist),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Log out the current token.

    The token id is blacklisted in memory, which takes effect on the very
    next request, and persisted so the revocation survives a restart.
    """
    blacklist.revoke(identity.token_id, identity.expires_at.timestamp())
    await persist_revocation(db, identity.token_id, identity.expires_at)
    await db.commit()

    logger.info(f"User logged out: {identity.name}")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    identity: Identity = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service),
) -> MeResponse:
    """Get the current user's information."""
    user = await auth_service.get_user_by_id(identity.subject_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return MeResponse.model_validate(user)
