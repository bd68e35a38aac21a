"""API routes, mounted under /api."""

from fastapi import APIRouter

from app.api import auth, health, users

router = APIRouter()
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(health.router, prefix="/health", tags=["health"])
