from fastapi import APIRouter, HTTPException

from prepdeck.config import settings
from prepdeck.models.request import ClearCacheRequest
from prepdeck.models.response import StatsResponse
from prepdeck.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
async def get_stats():
    """Service statistics"""
    from prepdeck.app import get_markup_service

    markup_svc = get_markup_service()
    solutions_dir = settings.validate_solutions_path()

    return StatsResponse(
        success=True,
        stats={
            "markup": markup_svc.get_stats(),
            "solutions_path": str(settings.solutions_dir),
            "solutions_available": solutions_dir is not None,
        },
    )


@router.post("/cache/clear")
async def clear_cache(request: ClearCacheRequest):
    """Drop memoized parse results"""
    from prepdeck.app import get_markup_service

    if not request.confirm:
        raise HTTPException(status_code=400, detail="Please confirm by setting confirm=true")

    svc = get_markup_service()
    dropped = svc.get_stats()["cache"]["size"]
    svc.clear_cache()
    logger.info(f"Cache clear requested via API, {dropped} parse results dropped")
    return {"success": True, "message": "Markup cache cleared"}
