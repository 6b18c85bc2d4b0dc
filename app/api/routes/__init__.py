"""API route modules."""

from fastapi import APIRouter

from app.api.routes import pdf, stream

router = APIRouter()

# 라우터 등록
router.include_router(stream.router)
router.include_router(pdf.router)
