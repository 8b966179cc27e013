"""Wishlist API Router - aggregates the resource routes."""

from fastapi import APIRouter

from wishlist.api import auth, gifts, users, volunteers

# Resource routes live at the root (no prefix), behind AuthGateMiddleware
api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(gifts.router)
api_router.include_router(volunteers.router)
