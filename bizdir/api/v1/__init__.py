"""V1 API router aggregation."""

from fastapi import APIRouter

from bizdir.api.v1.admin import router as admin_router
from bizdir.api.v1.adverts import router as adverts_router
from bizdir.api.v1.auth import router as auth_router
from bizdir.api.v1.businesses import router as businesses_router
from bizdir.api.v1.payments import router as payments_router
from bizdir.api.v1.products import router as products_router
from bizdir.api.v1.system import router as system_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(auth_router)
v1_router.include_router(businesses_router)
v1_router.include_router(payments_router)
v1_router.include_router(adverts_router)
v1_router.include_router(products_router)
v1_router.include_router(admin_router)
v1_router.include_router(system_router)
