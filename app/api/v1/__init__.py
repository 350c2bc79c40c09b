"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import auth, health, posts, public, upload

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(upload.router, prefix="/upload", tags=["upload"])
router.include_router(public.router, prefix="/public", tags=["public"])
router.include_router(public.home_router, prefix="/home", tags=["public"])
