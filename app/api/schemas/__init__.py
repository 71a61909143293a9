from app.api.schemas.common import ApiModel, MessageResponse
from app.api.schemas.user import (
    AdminUserUpdate,
    MeOut,
    MembershipUpdate,
    ProfileUpdate,
    SetAdminRequest,
    SetStatusRequest,
    UserDeletionOut,
    UserOut,
    UserStatsSummary,
    VerifyTokenOut,
    VerifyTokenRequest,
)
from app.api.schemas.article import (
    ArticleCreate,
    ArticleOut,
    ArticleStatusUpdate,
    ArticleUpdate,
)
from app.api.schemas.service import (
    ServiceActiveUpdate,
    ServiceCreate,
    ServiceOut,
    ServiceUpdate,
    VerificationUpdate,
)
from app.api.schemas.category import (
    CategoryCreate,
    CategoryOut,
    CategoryReorder,
    CategoryUpdate,
)
from app.api.schemas.rating import RatingCreate, RatingOut
from app.api.schemas.payment import (
    CheckoutOut,
    ReconciliationFailureOut,
    RetryOut,
)
