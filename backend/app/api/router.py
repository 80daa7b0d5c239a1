from fastapi import APIRouter
from app.api.hours.router import router as hours_router
from app.api.dashboard.router import router as dashboard_router
from app.api.reports.router import router as reports_router
from app.api.events.router import router as events_router
from app.api.categories.router import router as categories_router
from app.api.roles.router import router as roles_router
from app.api.volunteers.router import router as volunteers_router

api_router = APIRouter(
    prefix="/api/v1",
    responses={404: {"description": "Not found"}},
)

api_router.include_router(router=hours_router, tags=["hours"])
api_router.include_router(router=dashboard_router, tags=["dashboard"])
api_router.include_router(router=reports_router, tags=["reports"])
api_router.include_router(router=events_router, tags=["events"])
api_router.include_router(router=categories_router, tags=["categories"])
api_router.include_router(router=roles_router, tags=["roles"])
api_router.include_router(router=volunteers_router, tags=["volunteers"])
