"""
Weekly search quota for signed-in users.

Free users get a fixed number of searches per rolling week, counted from
their last reset. Premium users are never capped or counted.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Union

from dialectbase.users.models import User, utcnow
from dialectbase.users.store import UserStore

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)
UNLIMITED = "unlimited"


@dataclass
class QuotaDecision:
    allowed: bool
    searches_left: Union[int, str]


class QuotaPolicy:
    def __init__(self, store: UserStore, weekly_limit: int = 10, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.weekly_limit = weekly_limit
        self.clock = clock

    def _refresh(self, user: User) -> User:
        now = self.clock()
        if user.last_search_reset < now - WEEK:
            self.store.reset_weekly_searches(user.id, now)
            user.searches_this_week = 0
            user.last_search_reset = now
            logger.info(f"Weekly searches reset for user {user.id}")
        return user

    def check(self, user: User) -> QuotaDecision:
        """Apply the weekly reset, then decide whether ``user`` may search."""
        user = self._refresh(user)
        if user.is_premium:
            return QuotaDecision(True, UNLIMITED)
        remaining = self.weekly_limit - user.searches_this_week
        if remaining <= 0:
            logger.info(f"User {user.id} hit the weekly limit ({self.weekly_limit})")
            return QuotaDecision(False, 0)
        return QuotaDecision(True, remaining)

    def record(self, user: User) -> QuotaDecision:
        """Count one completed search and report what is left."""
        if user.is_premium:
            return QuotaDecision(True, UNLIMITED)
        count = user.searches_this_week + 1
        self.store.update_search_count(user.id, count)
        user.searches_this_week = count
        return QuotaDecision(True, max(0, self.weekly_limit - count))
