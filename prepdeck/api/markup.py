from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from prepdeck.api.middleware import limiter
from prepdeck.config import settings
from prepdeck.models.request import NormalizeRequest, RenderRequest
from prepdeck.models.response import NormalizeResponse, RenderResponse
from prepdeck.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/markup/render", response_model=RenderResponse)
@limiter.limit(settings.RENDER_RATE_LIMIT)
async def render_markup(payload: RenderRequest, request: Request):
    """Parse escaped markup into blocks (optionally HTML / plain text)"""
    from prepdeck.app import get_markup_service

    svc = get_markup_service()
    result = await run_in_threadpool(svc.render, payload.text or "", payload.format, payload.normalize)
    return RenderResponse(success=True, **result)


@router.post("/markup/normalize", response_model=NormalizeResponse)
@limiter.limit(settings.RENDER_RATE_LIMIT)
async def normalize_markup(payload: NormalizeRequest, request: Request):
    """Recover escaped text (mode=text) or escaped source code (mode=code)"""
    from prepdeck.app import get_markup_service

    svc = get_markup_service()
    text = svc.normalize(payload.text or "", payload.mode)
    return NormalizeResponse(success=True, mode=payload.mode, text=text)
