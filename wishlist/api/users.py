"""User directory and administration endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from wishlist.api.deps import get_current_identity, to_http_exception
from wishlist.core import get_db
from wishlist.schemas.gift import GiftRead
from wishlist.schemas.user import UserAdminRead, UserRead, UserUpdate, WishlistRead
from wishlist.services.errors import WishlistError
from wishlist.services.gift import GiftService
from wishlist.services.tokens import Identity
from wishlist.services.user import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_current_identity)],
)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_gift_service(db: AsyncSession = Depends(get_db)) -> GiftService:
    return GiftService(db)


@router.get("", response_model=list[UserRead])
async def list_users(
    service: UserService = Depends(get_user_service),
) -> list[UserRead]:
    users = await service.list_all()
    return [UserRead.model_validate(u) for u in users]


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    try:
        user = await service.get_or_404(user_id)
    except WishlistError as e:
        raise to_http_exception(e) from e
    return UserRead.model_validate(user)


@router.get("/{user_id}/wishlist", response_model=WishlistRead)
async def get_wishlist(
    user_id: int,
    service: UserService = Depends(get_user_service),
    gift_service: GiftService = Depends(get_gift_service),
) -> WishlistRead:
    """A user's gifts.

    Visible to every authenticated user. Only the taken flag is exposed,
    never who claimed a gift.
    """
    try:
        user = await service.get_or_404(user_id)
    except WishlistError as e:
        raise to_http_exception(e) from e

    gifts = await gift_service.list_for_owner(user.id)
    return WishlistRead(
        id=user.id,
        name=user.name,
        gifts=[GiftRead.model_validate(g) for g in gifts],
    )


@router.put("/{user_id}", response_model=UserAdminRead)
async def update_user(
    user_id: int,
    data: UserUpdate,
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> UserAdminRead:
    """Rename a user or change their role. Admin only."""
    try:
        user = await service.update(user_id, identity, name=data.name, role=data.role)
    except WishlistError as e:
        raise to_http_exception(e) from e
    return UserAdminRead.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> None:
    """Delete a user with their gifts and claims. Admin only."""
    try:
        await service.delete(user_id, identity)
    except WishlistError as e:
        raise to_http_exception(e) from e
