"""
Ratings Router - reviews of sellers (``user``) and service providers (``service``).
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query

from app.api.responses import ok
from app.api.schemas.rating import RatingCreate, RatingOut
from app.core.auth import CurrentUser, get_current_user
from app.core.services.rating_service import RatingService

logger = logging.getLogger(__name__)

router = APIRouter()

TargetType = Literal["user", "service"]


@router.get("")
async def list_ratings(
    target_id: str = Query(..., alias="targetId", min_length=1),
    target_type: TargetType = Query(..., alias="targetType"),
    current_user: CurrentUser = Depends(get_current_user),
    service: RatingService = Depends(RatingService.instance),
):
    """Ratings of one target, newest first."""
    ratings = await service.list_ratings(target_type, target_id)
    return ok([RatingOut.from_model(r) for r in ratings])


@router.get("/check")
async def has_rated(
    target_id: str = Query(..., alias="targetId", min_length=1),
    target_type: TargetType = Query(..., alias="targetType"),
    current_user: CurrentUser = Depends(get_current_user),
    service: RatingService = Depends(RatingService.instance),
):
    rated = await service.has_rated(current_user.uid, target_type, target_id)
    return ok({"hasRated": rated})


@router.post("", status_code=201)
async def create_rating(
    data: RatingCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: RatingService = Depends(RatingService.instance),
):
    rating = await service.create_rating(current_user.profile, data)
    return ok(RatingOut.from_model(rating))
