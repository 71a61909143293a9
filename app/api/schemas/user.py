"""User profile, membership and admin user-management schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, StrictBool

from app.api.schemas.common import ApiModel
from app.core.access_guard import AccessDecision
from app.database.models.user import User


MembershipStatusValue = Literal["pending", "active", "expired"]
MembershipPlanValue = Literal["monthly", "quarterly", "annual"]


class MembershipOut(ApiModel):
    status: str
    plan: str
    expires_at: datetime
    started_at: Optional[datetime] = None
    auto_renew: bool = False


class UserStatsOut(ApiModel):
    articles_published: int = 0
    total_sales: int = 0
    average_rating: float = 0.0
    ratings_count: int = 0
    recommendations: int = 0


class MembershipAccessOut(ApiModel):
    allowed: bool
    reason: Optional[str] = None
    message: Optional[str] = None


class UserOut(ApiModel):
    uid: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoURL")
    phone: Optional[str] = None
    is_admin: bool = False
    disabled: bool = False
    membership: MembershipOut
    stats: UserStatsOut
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, user: User) -> "UserOut":
        return cls(
            uid=user.id,
            email=user.email,
            display_name=user.display_name,
            photo_url=user.photo_url,
            phone=user.phone,
            is_admin=user.is_admin,
            disabled=user.disabled,
            membership=MembershipOut(
                status=user.membership_status,
                plan=user.membership_plan,
                expires_at=user.membership_expires_at,
                started_at=user.membership_started_at,
                auto_renew=user.membership_auto_renew,
            ),
            stats=UserStatsOut(
                articles_published=user.articles_published,
                total_sales=user.total_sales,
                average_rating=user.average_rating,
                ratings_count=user.ratings_count,
                recommendations=user.recommendations,
            ),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class MeOut(UserOut):
    membership_access: MembershipAccessOut

    @classmethod
    def build(cls, user: User, decision: AccessDecision) -> "MeOut":
        base = UserOut.from_model(user)
        return cls(
            **base.model_dump(),
            membership_access=MembershipAccessOut(
                allowed=decision.allowed,
                reason=decision.reason,
                message=decision.message,
            ),
        )


class ProfileUpdate(ApiModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    photo_url: Optional[str] = Field(None, alias="photoURL", max_length=2048)
    phone: Optional[str] = Field(None, max_length=30)


class VerifyTokenRequest(ApiModel):
    token: str = Field(..., min_length=1)


class VerifyTokenOut(ApiModel):
    uid: str
    email: Optional[str] = None
    email_verified: bool = False


# ── admin ──

class AdminUserUpdate(ApiModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    disabled: Optional[StrictBool] = None
    admin: Optional[StrictBool] = None


class SetStatusRequest(ApiModel):
    disabled: StrictBool


class SetAdminRequest(ApiModel):
    is_admin: StrictBool


class MembershipUpdate(ApiModel):
    status: Optional[MembershipStatusValue] = None
    plan: Optional[MembershipPlanValue] = None
    expires_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    auto_renew: Optional[StrictBool] = None


class UserStatsSummary(ApiModel):
    total_users: int
    active_users: int
    disabled_users: int
    admin_users: int


class UserDeletionOut(ApiModel):
    uid: str
    status: str
    completed_steps: list
    last_error: Optional[str] = None
