"""
Categories Router - public taxonomy reads, admin-managed writes.
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Path, Query

from app.api.responses import ok
from app.api.schemas.category import CategoryCreate, CategoryOut, CategoryReorder, CategoryUpdate
from app.core.auth import CurrentUser, get_current_admin
from app.core.services.category_service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_categories(
    type: Optional[Literal["article", "service"]] = Query(None, description="article | service"),
    service: CategoryService = Depends(CategoryService.instance),
):
    """Active categories, ordered for display."""
    categories = await service.list_categories(type)
    return ok([CategoryOut.from_model(c) for c in categories])


@router.get("/admin/all")
async def list_all_categories(
    admin: CurrentUser = Depends(get_current_admin),
    service: CategoryService = Depends(CategoryService.instance),
):
    categories = await service.list_all()
    return ok([CategoryOut.from_model(c) for c in categories])


@router.post("/reorder")
async def reorder_categories(
    data: CategoryReorder,
    admin: CurrentUser = Depends(get_current_admin),
    service: CategoryService = Depends(CategoryService.instance),
):
    await service.reorder(data.category_ids)
    return ok({"message": "Categories reordered"})


@router.post("/seed")
async def seed_categories(
    admin: CurrentUser = Depends(get_current_admin),
    service: CategoryService = Depends(CategoryService.instance),
):
    created = await service.seed_defaults()
    return ok({"seeded": created > 0, "created": created})


@router.post("", status_code=201)
async def create_category(
    data: CategoryCreate,
    admin: CurrentUser = Depends(get_current_admin),
    service: CategoryService = Depends(CategoryService.instance),
):
    category = await service.create_category(data)
    return ok(CategoryOut.from_model(category))


@router.put("/{category_id}")
async def update_category(
    data: CategoryUpdate,
    category_id: int = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    service: CategoryService = Depends(CategoryService.instance),
):
    category = await service.update_category(category_id, data)
    return ok(CategoryOut.from_model(category))


@router.delete("/{category_id}")
async def delete_category(
    category_id: int = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    service: CategoryService = Depends(CategoryService.instance),
):
    """Soft delete: the category is hidden, existing listings keep their slug."""
    await service.delete_category(category_id)
    logger.info(f"Category {category_id} deactivated by {admin.uid}")
    return ok({"message": "Category deleted"})
