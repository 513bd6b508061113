"""Entitlement gate deciding whether a generation attempt is allowed."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tryon.config.settings import FREE_LIMIT

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class EntitlementState:
    """Snapshot of the user's free usage and premium status."""

    free_attempts_used: int = 0
    is_premium: bool = False
    free_limit: int = FREE_LIMIT

    @property
    def can_attempt(self) -> bool:
        return self.is_premium or self.free_attempts_used < self.free_limit

    @property
    def remaining_free_attempts(self) -> int:
        return max(self.free_limit - self.free_attempts_used, 0)


class EntitlementGate:
    """Holds the usage counter and premium flag for one user.

    State lives for the lifetime of the process only. The counter is never
    decremented and premium cannot be revoked once granted.
    """

    def __init__(self, free_limit: int = FREE_LIMIT) -> None:
        if free_limit < 0:
            raise ValueError("free_limit must be non-negative")
        self._free_limit = free_limit
        self._free_attempts_used = 0
        self._is_premium = False

    @property
    def state(self) -> EntitlementState:
        return EntitlementState(
            free_attempts_used=self._free_attempts_used,
            is_premium=self._is_premium,
            free_limit=self._free_limit,
        )

    @property
    def can_attempt(self) -> bool:
        return self.state.can_attempt

    def record_attempt(self) -> None:
        """Count one successful generation against the free quota."""

        if self._is_premium:
            return
        self._free_attempts_used += 1
        logger.info(
            "Free attempt recorded (%s/%s used).",
            self._free_attempts_used,
            self._free_limit,
        )

    def grant_premium(self) -> None:
        """Mark the user as premium; repeated calls have no extra effect."""

        if self._is_premium:
            return
        self._is_premium = True
        logger.info("Premium access granted.")
