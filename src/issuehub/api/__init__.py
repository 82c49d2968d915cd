"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health and auth routers are
open (no auth required).
"""

from fastapi import APIRouter, Depends

from issuehub.api.auth import router as auth_router
from issuehub.api.health import router as health_router
from issuehub.api.issues import router as issues_router
from issuehub.api.me import router as me_router
from issuehub.api.organizations import router as organizations_router
from issuehub.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api/v1")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer JWT
api_router.include_router(me_router, tags=["me"], dependencies=_auth)
api_router.include_router(organizations_router, tags=["organizations"], dependencies=_auth)
api_router.include_router(issues_router, tags=["issues"], dependencies=_auth)
