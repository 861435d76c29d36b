from fastapi import APIRouter
from sitesmith.api.routes_health import router as health_router
from sitesmith.api.routes_chat import router as chat_router
from sitesmith.api.routes_projects import router as projects_router
from sitesmith.api.routes_settings import router as settings_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(chat_router, tags=["chat"])
router.include_router(projects_router, tags=["projects"])
router.include_router(settings_router, tags=["settings"])
