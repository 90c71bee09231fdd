"""API v1 router initialization."""
from fastapi import APIRouter

from .auth import router as auth_router
from .faces import router as faces_router
from .users import router as users_router

# Create v1 router
router = APIRouter()

router.include_router(faces_router, tags=["faces"])
router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(users_router, tags=["users"])
