from fastapi import APIRouter, Query
from starlette.concurrency import run_in_threadpool

from prepdeck.models.response import ManifestResponse, SolutionResponse

router = APIRouter()


@router.get("/solutions/manifest", response_model=ManifestResponse)
async def get_manifest():
    """Which problems have generated solutions (main + follow-up parts)"""
    from prepdeck.app import get_solution_service

    svc = get_solution_service()
    manifest = await run_in_threadpool(svc.manifest)
    return ManifestResponse(success=True, **manifest)


@router.get("/solutions/{problem_id}", response_model=SolutionResponse)
async def get_solution(problem_id: str, part: str = Query("main", description="main or partN")):
    """Rendered practice solution"""
    from prepdeck.app import get_solution_service

    svc = get_solution_service()
    result = await run_in_threadpool(svc.render, problem_id, part)
    return SolutionResponse(success=True, **result)
