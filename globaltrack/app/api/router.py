"""
API Router.

Aggregates all endpoints mounted under ``/api``.
"""

from fastapi import APIRouter
from globaltrack.app.api.endpoints import auth, settings, tracking

router = APIRouter()

router.include_router(auth.router)
router.include_router(tracking.router)
router.include_router(settings.router)
