# Wishlist Middleware
from wishlist.middleware.auth_gate import AuthGateMiddleware
from wishlist.middleware.security_headers import SecurityHeadersMiddleware

__all__ = ["AuthGateMiddleware", "SecurityHeadersMiddleware"]
