"""Shared request dependencies for the API routers."""

from fastapi import HTTPException, Request, status

from wishlist.services.errors import AuthenticationError, WishlistError
from wishlist.services.token_blacklist import TokenBlacklist
from wishlist.services.tokens import Identity, TokenIssuer


def to_http_exception(error: WishlistError) -> HTTPException:
    """Translate a service-layer error at the handler boundary."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(error, AuthenticationError) else None
    return HTTPException(status_code=error.status_code, detail=error.message, headers=headers)


def get_current_identity(request: Request) -> Identity:
    """Dependency to get the identity verified by AuthGateMiddleware."""
    identity = getattr(request.state, "identity", None)
    if not isinstance(identity, Identity):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def get_token_blacklist(request: Request) -> TokenBlacklist:
    return request.app.state.token_blacklist


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer
