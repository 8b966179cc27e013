# Wishlist Models
from wishlist.models.base import BaseModel
from wishlist.models.gift import Gift
from wishlist.models.revoked_token import RevokedToken
from wishlist.models.user import Role, User
from wishlist.models.volunteer import Volunteer

__all__ = [
    "BaseModel",
    "Gift",
    "RevokedToken",
    "Role",
    "User",
    "Volunteer",
]
