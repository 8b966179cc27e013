"""Domain exceptions raised by the service layer.

Each class carries the HTTP status it maps to; route handlers translate
them into ``HTTPException`` at their boundary.
"""


class WishlistError(Exception):
    """Base class for service-layer errors."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WishlistError):
    """Missing or blank request fields."""

    status_code = 400


class AuthenticationError(WishlistError):
    """Caller could not be authenticated."""

    status_code = 401


class InvalidCredentialsError(AuthenticationError):
    """Invalid name or password.

    Raised for both "user not found" and "wrong password".
    """


class TokenError(AuthenticationError):
    """Bearer token error."""


class InvalidTokenError(TokenError):
    """Token is missing, malformed, badly signed or has bad claims."""


class TokenExpiredError(TokenError):
    """Token is outside its validity window."""


class TokenRevokedError(TokenError):
    """Token was revoked by logout."""


class AuthorizationError(WishlistError):
    """Authenticated caller lacks the required role."""

    status_code = 403


class NotFoundError(WishlistError):
    """Entity does not exist, or is not visible to the caller."""

    status_code = 404


class ConflictError(WishlistError):
    """Write conflicts with existing state (already claimed, concurrent update)."""

    status_code = 409


class DuplicateNameError(ConflictError):
    """Registration with a name that is already taken."""

    status_code = 400
