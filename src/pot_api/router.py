from fastapi import APIRouter

from pot_api.routers.jobs import router as jobs_router
from pot_api.routers.verify import router as verify_router

router = APIRouter()
router.include_router(verify_router)
router.include_router(jobs_router)
