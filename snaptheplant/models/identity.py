"""User identity supplied by the auth provider."""

from dataclasses import dataclass

from snaptheplant.models.enums import SubscriptionTier

ANONYMOUS_USER_ID = "anonymous"


@dataclass(frozen=True)
class UserIdentity:
    user_id: str = ANONYMOUS_USER_ID
    display_name: str = ""
    tier: SubscriptionTier = SubscriptionTier.FREE

    @property
    def is_anonymous(self) -> bool:
        return self.user_id == ANONYMOUS_USER_ID
