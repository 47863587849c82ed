"""
Daily rate limiter for AI identifications.

One `{count, date}` record per user, kept in the persistent store. The
window is a tumbling UTC calendar day: any stored date other than today counts
as zero. Reads and writes are not atomic; this is a soft anti-abuse limit,
not a security boundary.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Dict, Optional

from snaptheplant.core.errors import QuotaExceededError
from snaptheplant.models.enums import SubscriptionTier
from snaptheplant.storage.store import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

RATE_LIMIT_PREFIX = "rate_limit:"
DEFAULT_DAILY_LIMIT = 15


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class RateLimitRecord:
    count: int
    date: str  # YYYY-MM-DD

    def to_dict(self) -> Dict:
        return {"count": self.count, "date": self.date}


class RateLimiter:
    """
    Tumbling-window daily limiter.

    Usage:
        limiter = RateLimiter(store, daily_limit=15)
        limiter.acquire("user-1")   # raises QuotaExceededError when spent
    """

    def __init__(
        self,
        store: KeyValueStore,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        today: Optional[Callable[[], date]] = None,
    ):
        self.store = store
        self.daily_limit = daily_limit
        self._today = today or _utc_today

    def _today_string(self) -> str:
        return self._today().isoformat()

    def _key(self, user_id: str) -> str:
        return f"{RATE_LIMIT_PREFIX}{user_id}"

    def status(self, user_id: str) -> RateLimitRecord:
        """Current record for a user, reset to zero if it is from another day."""
        today = self._today_string()
        try:
            stored = self.store.get(self._key(user_id))
        except StoreError as e:
            logger.error(f"Error reading rate limit for {user_id}: {e}")
            stored = None

        if isinstance(stored, dict) and stored.get("date") == today:
            return RateLimitRecord(count=int(stored.get("count", 0)), date=today)

        record = RateLimitRecord(count=0, date=today)
        self._save(user_id, record)
        return record

    def _save(self, user_id: str, record: RateLimitRecord) -> None:
        try:
            self.store.put(self._key(user_id), record.to_dict())
        except StoreError as e:
            logger.error(f"Error updating rate limit for {user_id}: {e}")

    def remaining(self, user_id: str) -> int:
        return max(0, self.daily_limit - self.status(user_id).count)

    def can_call(self, user_id: str, tier: SubscriptionTier = SubscriptionTier.FREE) -> bool:
        """Whether one more call is allowed today."""
        if not tier.is_rate_limited:
            return True
        return self.status(user_id).count < self.daily_limit

    def record_call(self, user_id: str) -> RateLimitRecord:
        """Count one call against today's budget."""
        current = self.status(user_id)
        record = RateLimitRecord(count=current.count + 1, date=current.date)
        self._save(user_id, record)
        return record

    def acquire(self, user_id: str, tier: SubscriptionTier = SubscriptionTier.FREE) -> None:
        """
        Check and consume one call.

        Raises:
            QuotaExceededError: If today's budget is spent
        """
        if not tier.is_rate_limited:
            return
        if not self.can_call(user_id, tier):
            logger.info(f"Daily limit of {self.daily_limit} reached for user {user_id}")
            raise QuotaExceededError()
        self.record_call(user_id)
