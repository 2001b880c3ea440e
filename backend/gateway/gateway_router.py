# backend/gateway/gateway_router.py
from fastapi import APIRouter

from routers.auth_router import router as auth_router
from routers.admin_router import router as admin_router

gateway_router = APIRouter()

gateway_router.include_router(auth_router)    # /api/auth/...
gateway_router.include_router(admin_router)   # /api/admin/...
