"""
Request identity.

Authentication itself happens upstream; the gateway forwards the resolved
user as headers. Requests without them are treated as the anonymous free
user, who may browse the catalog and answer quizzes but cannot run photo
analyses or keep a collection.
"""

import logging
from typing import Optional

from fastapi import Depends, Header

from snaptheplant.api.errors import to_http_exception
from snaptheplant.core.errors import AuthenticationRequiredError
from snaptheplant.models.enums import SubscriptionTier
from snaptheplant.models.identity import ANONYMOUS_USER_ID, UserIdentity

logger = logging.getLogger(__name__)


def parse_tier(value: Optional[str]) -> SubscriptionTier:
    """Resolve a tier header; anything unrecognised is the free tier."""
    if not value:
        return SubscriptionTier.FREE
    try:
        return SubscriptionTier(value.strip().lower())
    except ValueError:
        logger.warning(f"Unknown subscription tier {value!r}, treating as free")
        return SubscriptionTier.FREE


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
    x_subscription_tier: Optional[str] = Header(default=None),
) -> UserIdentity:
    """Build the caller's identity from the forwarded headers."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        return UserIdentity()
    return UserIdentity(
        user_id=user_id,
        display_name=(x_user_name or "").strip(),
        tier=parse_tier(x_subscription_tier),
    )


async def require_signed_in_user(user: UserIdentity = Depends(get_current_user)) -> UserIdentity:
    """Like get_current_user, but rejects anonymous callers with 401."""
    if user.is_anonymous:
        raise to_http_exception(AuthenticationRequiredError())
    return user


__all__ = ["ANONYMOUS_USER_ID", "get_current_user", "parse_tier", "require_signed_in_user"]
