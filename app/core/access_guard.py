"""
Access Guard - decides whether a user may run membership-only operations.

``status`` is written only by payment reconciliation (and admins), so it can lag
real time; the guard therefore re-checks ``expires_at`` on every call. Expiry is
derived state: nothing has to write ``expired`` for the guard to deny.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.core.exceptions import ApiError, ErrorCode
from app.database.models.user import User
from app.utils.enums import MembershipStatus
from app.utils.time_utils import as_utc


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    status_code: int = 200

    def raise_for_denial(self) -> None:
        if not self.allowed:
            raise ApiError(self.status_code, self.reason, self.message)


ALLOW = AccessDecision(allowed=True)


def evaluate_membership(user: Optional[User], now: datetime) -> AccessDecision:
    """Evaluate the rules in order; the first violated one names the denial."""
    if user is None:
        return AccessDecision(False, ErrorCode.USER_NOT_FOUND, "User profile not found", 404)

    if user.membership_status != MembershipStatus.ACTIVE:
        return AccessDecision(False, ErrorCode.MEMBERSHIP_INACTIVE, "Your membership is not active", 403)

    expires_at = as_utc(user.membership_expires_at)
    if expires_at is None or expires_at <= as_utc(now):
        return AccessDecision(False, ErrorCode.MEMBERSHIP_EXPIRED, "Your membership has expired", 403)

    return ALLOW
