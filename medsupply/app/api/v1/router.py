from fastapi import APIRouter

from medsupply.app.api.v1.endpoints.auth import router as auth_router
from medsupply.app.api.v1.endpoints.users import router as users_router
from medsupply.app.api.v1.endpoints.branches import router as branches_router
from medsupply.app.api.v1.endpoints.products import router as products_router
from medsupply.app.api.v1.endpoints.issuance import router as issuance_router

router = APIRouter()
router.include_router(auth_router, tags=["auth"])
router.include_router(users_router, tags=["users"])
router.include_router(branches_router, tags=["branches"])
router.include_router(products_router, tags=["products"])
router.include_router(issuance_router, tags=["issuance"])
