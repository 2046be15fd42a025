from fastapi import APIRouter

from .confirm import router as confirm_router
from .subscribe import router as subscribe_router

router = APIRouter()
router.include_router(subscribe_router, prefix="/subscriptions")
router.include_router(confirm_router, prefix="/subscriptions")
