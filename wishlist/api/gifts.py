"""Gift CRUD endpoints. Mutation is owner-only."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from wishlist.api.deps import get_current_identity, to_http_exception
from wishlist.core import get_db
from wishlist.schemas.gift import GiftCreate, GiftRead, GiftUpdate
from wishlist.services.errors import WishlistError
from wishlist.services.gift import GiftService
from wishlist.services.tokens import Identity

router = APIRouter(
    prefix="/gift",
    tags=["gifts"],
    dependencies=[Depends(get_current_identity)],
)


def get_gift_service(db: AsyncSession = Depends(get_db)) -> GiftService:
    return GiftService(db)


@router.get("", response_model=list[GiftRead])
async def list_gifts(
    service: GiftService = Depends(get_gift_service),
) -> list[GiftRead]:
    gifts = await service.list_all()
    return [GiftRead.model_validate(g) for g in gifts]


@router.get("/{gift_id}", response_model=GiftRead)
async def get_gift(
    gift_id: int,
    service: GiftService = Depends(get_gift_service),
) -> GiftRead:
    try:
        gift = await service.get_or_404(gift_id)
    except WishlistError as e:
        raise to_http_exception(e) from e
    return GiftRead.model_validate(gift)


@router.post("", response_model=GiftRead, status_code=status.HTTP_201_CREATED)
async def create_gift(
    data: GiftCreate,
    identity: Identity = Depends(get_current_identity),
    service: GiftService = Depends(get_gift_service),
) -> GiftRead:
    """Add a gift to the caller's own wishlist."""
    try:
        gift = await service.create(
            identity,
            title=data.title,
            description=data.description,
            link=data.link,
            category=data.category,
        )
    except WishlistError as e:
        raise to_http_exception(e) from e
    return GiftRead.model_validate(gift)


@router.put("/{gift_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_gift(
    gift_id: int,
    data: GiftUpdate,
    identity: Identity = Depends(get_current_identity),
    service: GiftService = Depends(get_gift_service),
) -> None:
    """Update an owned gift. Gifts of other users answer 404."""
    try:
        await service.update(gift_id, identity, data.model_dump(exclude_unset=True))
    except WishlistError as e:
        raise to_http_exception(e) from e


@router.delete("/{gift_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gift(
    gift_id: int,
    identity: Identity = Depends(get_current_identity),
    service: GiftService = Depends(get_gift_service),
) -> None:
    """Delete an owned gift. Gifts of other users answer 404."""
    try:
        await service.delete(gift_id, identity)
    except WishlistError as e:
        raise to_http_exception(e) from e
