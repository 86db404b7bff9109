from fastapi import APIRouter

from prepdeck.api import markup, solutions, admin

router = APIRouter(prefix="/api")

router.include_router(markup.router, tags=["Markup"])
router.include_router(solutions.router, tags=["Solutions"])
router.include_router(admin.router, tags=["Admin"])
