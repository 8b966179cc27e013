# Wishlist Services
from wishlist.services.auth import AuthService
from wishlist.services.gift import GiftService
from wishlist.services.token_blacklist import TokenBlacklist
from wishlist.services.tokens import Identity, TokenIssuer, TokenVerifier
from wishlist.services.user import UserService
from wishlist.services.volunteer import VolunteerService

__all__ = [
    "AuthService",
    "GiftService",
    "Identity",
    "TokenBlacklist",
    "TokenIssuer",
    "TokenVerifier",
    "UserService",
    "VolunteerService",
]
