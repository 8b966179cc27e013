"""Bearer token authentication middleware.

Every request is denied unless it carries a valid, unrevoked bearer token or
targets one of the explicitly public paths. Route handlers never see an
unauthenticated request, so forgetting a per-route check cannot open a hole.
"""

import logging
from collections.abc import Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from wishlist.core.logging import bind_request_context, reset_request_context
from wishlist.services.errors import TokenError, TokenExpiredError
from wishlist.services.tokens import TokenVerifier

logger = logging.getLogger(__name__)

# Reachable without a token (exact match)
PUBLIC_PATHS = frozenset(
    {
        "/health",
        "/auth/login",
        "/auth/register",
    }
)

DOCS_PATHS = frozenset({"/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json"})


def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"detail": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthGateMiddleware(BaseHTTPMiddleware):
    """Validate the bearer token and attach the verified identity.

    - Token must be in: Authorization: Bearer <token>
    - Signature, issuer, audience and validity window are checked first
    - Revoked token ids are rejected via the in-memory blacklist
    - On success ``request.state.identity`` holds an ``Identity``
    """

    def __init__(
        self,
        app: ASGIApp,
        verifier: TokenVerifier,
        public_paths: Iterable[str] = PUBLIC_PATHS,
    ):
        super().__init__(app)
        self.verifier = verifier
        self.public_paths = frozenset(public_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        context = bind_request_context(method=request.method, path=path)
        try:
            return await self._authenticate(request, call_next)
        finally:
            reset_request_context(context)

    async def _authenticate(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path

        # CORS preflight requests carry no credentials
        if request.method == "OPTIONS":
            return await call_next(request)

        if path in self.public_paths:
            return await call_next(request)

        token = self._extract_token(request)
        if not token:
            logger.warning(f"Request without bearer token: {request.method} {path}")
            return _unauthorized(
                "Authentication required. Include token in Authorization: Bearer <token> header."
            )

        try:
            identity = self.verifier.verify(token)
        except TokenExpiredError as e:
            logger.debug(f"Expired token for: {request.method} {path}")
            return _unauthorized(e.message)
        except TokenError as e:
            logger.warning(f"Rejected token for: {request.method} {path} - {e}")
            return _unauthorized(e.message)

        request.state.identity = identity
        bind_request_context(subject_id=identity.subject_id, token_id=identity.token_id)
        return await call_next(request)

    def _extract_token(self, request: Request) -> str | None:
        """Extract the bearer token from the Authorization header."""
        auth_header = request.headers.get("Authorization", "")
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()
