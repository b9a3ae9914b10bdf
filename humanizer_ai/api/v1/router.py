from fastapi import APIRouter

from humanizer_ai.api.v1 import documents, humanize, render

router = APIRouter()
router.include_router(humanize.router, tags=["humanize"])
router.include_router(documents.router, tags=["documents"])
router.include_router(render.router, tags=["render"])
