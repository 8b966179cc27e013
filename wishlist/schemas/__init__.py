# Wishlist Schemas
from wishlist.schemas.auth import LoginRequest, LoginResponse, MeResponse, RegisterRequest
from wishlist.schemas.common import CamelModel, MessageResponse
from wishlist.schemas.gift import GiftCreate, GiftRead, GiftUpdate
from wishlist.schemas.health import HealthResponse
from wishlist.schemas.user import UserAdminRead, UserRead, UserUpdate, WishlistRead
from wishlist.schemas.volunteer import VolunteerCreate, VolunteerRead

__all__ = [
    "CamelModel",
    "GiftCreate",
    "GiftRead",
    "GiftUpdate",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "RegisterRequest",
    "UserAdminRead",
    "UserRead",
    "UserUpdate",
    "VolunteerCreate",
    "VolunteerRead",
]
