"""Claim ("volunteer") endpoints.

Callers only ever see their own claims; a claim made by someone else is
answered exactly like one that does not exist.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from wishlist.api.deps import get_current_identity, to_http_exception
from wishlist.core import get_db
from wishlist.models.gift import Gift
from wishlist.models.volunteer import Volunteer
from wishlist.schemas.gift import GiftRead
from wishlist.schemas.volunteer import VolunteerCreate, VolunteerRead
from wishlist.services.errors import WishlistError
from wishlist.services.tokens import Identity
from wishlist.services.volunteer import VolunteerService

router = APIRouter(
    prefix="/volunteers",
    tags=["volunteers"],
    dependencies=[Depends(get_current_identity)],
)


def get_volunteer_service(db: AsyncSession = Depends(get_db)) -> VolunteerService:
    return VolunteerService(db)


def _to_read(claim: Volunteer, gift: Gift) -> VolunteerRead:
    return VolunteerRead(
        id=claim.id,
        gift_id=claim.gift_id,
        volunteer_user_id=claim.volunteer_user_id,
        gift=GiftRead.model_validate(gift),
    )


@router.get("", response_model=list[VolunteerRead])
async def list_claims(
    identity: Identity = Depends(get_current_identity),
    service: VolunteerService = Depends(get_volunteer_service),
) -> list[VolunteerRead]:
    claims = await service.list_for_claimant(identity)
    return [_to_read(claim, gift) for claim, gift in claims]


@router.get("/{claim_id}", response_model=VolunteerRead)
async def get_claim(
    claim_id: int,
    identity: Identity = Depends(get_current_identity),
    service: VolunteerService = Depends(get_volunteer_service),
) -> VolunteerRead:
    try:
        claim, gift = await service.get_own(claim_id, identity)
    except WishlistError as e:
        raise to_http_exception(e) from e
    return _to_read(claim, gift)


@router.post("", response_model=VolunteerRead, status_code=status.HTTP_201_CREATED)
async def create_claim(
    data: VolunteerCreate,
    identity: Identity = Depends(get_current_identity),
    service: VolunteerService = Depends(get_volunteer_service),
) -> VolunteerRead:
    """Claim someone else's gift.

    Returns 404 for an unknown gift and 409 if it is already taken,
    including when a concurrent claim commits first.
    """
    try:
        claim, gift = await service.claim(data.gift_id, identity)
    except WishlistError as e:
        raise to_http_exception(e) from e
    return _to_read(claim, gift)


@router.delete("/{claim_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_claim(
    claim_id: int,
    identity: Identity = Depends(get_current_identity),
    service: VolunteerService = Depends(get_volunteer_service),
) -> None:
    """Release a claim; the gift becomes claimable again."""
    try:
        await service.release(claim_id, identity)
    except WishlistError as e:
        raise to_http_exception(e) from e
