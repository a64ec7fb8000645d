"""API v1 router aggregator."""

from fastapi import APIRouter

from app.api.v1.admin.routes import router as admin_router
from app.api.v1.auth.routes import router as auth_router
from app.api.v1.briefs.routes import router as briefs_router
from app.api.v1.subscribers.routes import router as subscribers_router
from app.api.v1.tools.routes import router as tools_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(briefs_router, prefix="/briefs", tags=["Briefs"])
api_router.include_router(subscribers_router, prefix="/subscribers", tags=["Subscribers"])
api_router.include_router(tools_router, prefix="/tools", tags=["Tools"])
api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])
