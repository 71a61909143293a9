"""
String constants for marketplace fields.
Using plain strings (not Enums) so rows and JSON payloads stay interchangeable.
"""


class MembershipStatus:
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"


class MembershipPlan:
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class ArticleCondition:
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"


class ArticleStatus:
    ACTIVE = "active"
    RESERVED = "reserved"
    SOLD = "sold"
    INACTIVE = "inactive"


class VerificationStatus:
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class CategoryType:
    ARTICLE = "article"
    SERVICE = "service"


class RatingTargetType:
    USER = "user"
    SERVICE = "service"


class DeletionStatus:
    IN_PROGRESS = "in_progress"
    FAILED = "failed"
    COMPLETED = "completed"
