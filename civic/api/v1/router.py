# civic/api/v1/router.py
from fastapi import APIRouter

from civic.api.v1.auth import router as auth_router
from civic.api.v1.health import router as health_router
from civic.api.v1.issues import router as issues_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(issues_router)
