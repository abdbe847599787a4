from fastapi import APIRouter
from webty.api.v0.comment.main import router as comment_router

router = APIRouter(prefix="/api")
router.include_router(comment_router)
