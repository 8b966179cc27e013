# Wishlist API
from wishlist.api.router import api_router

__all__ = ["api_router"]
