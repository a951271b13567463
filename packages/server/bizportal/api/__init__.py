"""
API Router

/api/auth      — login (unauthenticated)
/api/ceo       — administration, CEO only
/api/employee  — employee self-service
/api/client    — client self-service
"""

from fastapi import APIRouter

from . import auth, client, employee
from .ceo import router as ceo_router

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(ceo_router, prefix="/ceo")
router.include_router(employee.router, prefix="/employee", tags=["Employee"])
router.include_router(client.router, prefix="/client", tags=["Client"])
