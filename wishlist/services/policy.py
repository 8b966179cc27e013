"""Ownership and role rules shared by the resource services.

Non-owners are answered with "not found" everywhere ownership is enforced,
so a caller can never tell an existing-but-foreign record from a missing one.
"""

from typing import assert_never

from wishlist.models.gift import Gift
from wishlist.models.user import Role
from wishlist.models.volunteer import Volunteer
from wishlist.services.errors import AuthorizationError, NotFoundError
from wishlist.services.tokens import Identity


def can_administer(role: Role) -> bool:
    """Whether a role may mutate or delete other users."""
    match role:
        case Role.ADMIN:
            return True
        case Role.USER:
            return False
        case _:
            assert_never(role)


def require_admin(identity: Identity) -> None:
    if not can_administer(identity.role):
        raise AuthorizationError("Administrator role required")


def ensure_gift_owner(gift: Gift | None, identity: Identity) -> Gift:
    """Return the gift if the caller owns it; otherwise it does not exist."""
    if gift is None or gift.user_id != identity.subject_id:
        raise NotFoundError("Gift not found")
    return gift


def ensure_claimant(claim: Volunteer | None, identity: Identity) -> Volunteer:
    """Return the claim if the caller made it; otherwise it does not exist."""
    if claim is None or claim.volunteer_user_id != identity.subject_id:
        raise NotFoundError("Claim not found")
    return claim
