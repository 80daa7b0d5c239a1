from fastapi import APIRouter

from app.db.core import SessionDep
from app.api.categories import service
from app.api.categories.schemas import (
    CategoryCreate,
    CategoryPublic,
    CategoryUpdate,
    CategoryWithStats,
)
from app.core.auth.dependencies import AdminAuth, CallerAuth

router = APIRouter(prefix="/categories")


@router.get("/list", summary="List active event categories")
async def list_categories(
    caller: CallerAuth, session: SessionDep
) -> list[CategoryWithStats]:
    return await service.list_categories(session)


@router.get("/all", summary="List all event categories, including inactive")
async def list_all_categories(
    caller: AdminAuth, session: SessionDep
) -> list[CategoryWithStats]:
    return await service.list_categories(session, include_inactive=True)


@router.get("/code/{code}", summary="Get a category by code")
async def get_category_by_code(
    code: str, caller: CallerAuth, session: SessionDep
) -> CategoryPublic:
    return await service.get_category_by_code(session, code)


@router.get("/{category_id}", summary="Get a category")
async def get_category(
    category_id: int, caller: CallerAuth, session: SessionDep
) -> CategoryPublic:
    return await service.get_category(session, category_id)


@router.post("/create", summary="Create an event category")
async def create_category(
    caller: AdminAuth, session: SessionDep, category: CategoryCreate
) -> CategoryPublic:
    return await service.create_category(session, category)


@router.put("/{category_id}", summary="Update an event category")
async def update_category(
    category_id: int, caller: AdminAuth, session: SessionDep, category: CategoryUpdate
) -> CategoryPublic:
    return await service.update_category(session, category_id, category)


@router.post("/{category_id}/deactivate", summary="Deactivate an event category")
async def deactivate_category(
    category_id: int, caller: AdminAuth, session: SessionDep
) -> CategoryPublic:
    return await service.set_category_active(session, category_id, active=False)


@router.post("/{category_id}/reactivate", summary="Reactivate an event category")
async def reactivate_category(
    category_id: int, caller: AdminAuth, session: SessionDep
) -> CategoryPublic:
    return await service.set_category_active(session, category_id, active=True)


@router.delete("/{category_id}", summary="Delete an unused event category")
async def delete_category(category_id: int, caller: AdminAuth, session: SessionDep):
    return await service.delete_category(session, category_id)
