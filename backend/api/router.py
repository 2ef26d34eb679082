from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_judge, get_search_client
from config import settings
from models.requests import BatchJudgeRequest, JudgeRequest
from models.responses import BatchJudgeResponse, JudgeResponse, ProjectsResponse
from services.batch_orchestrator import judge_batch
from services.errors import JudgeError, UpstreamFetchError
from services.pipeline.judge import ProjectJudge
from services.project_search import ProjectSearchClient

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _require_judge(judge: ProjectJudge | None) -> ProjectJudge:
    if judge is None:
        raise HTTPException(status_code=503, detail="Gemini API key not configured")
    return judge


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
        "github_configured": bool(settings.github_token),
    }


@router.get("/projects", response_model=ProjectsResponse)
@limiter.limit("30/minute")
async def list_projects(
    request: Request,
    offset: int = Query(0, alias="from", ge=0),
    size: int = Query(20, ge=1, le=100),
    search: ProjectSearchClient = Depends(get_search_client),
):
    try:
        projects, total = await search.search_projects(offset, size)
    except UpstreamFetchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ProjectsResponse(projects=projects, total=total, offset=offset, size=size)


@router.get("/projects/all", response_model=ProjectsResponse)
@limiter.limit("5/minute")
async def list_all_projects(
    request: Request,
    search: ProjectSearchClient = Depends(get_search_client),
):
    try:
        projects = await search.fetch_all_projects(
            page_size=settings.page_size, max_projects=settings.max_projects
        )
    except UpstreamFetchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ProjectsResponse(projects=projects, total=len(projects), size=len(projects))


@router.post("/judge", response_model=JudgeResponse)
@limiter.limit("30/minute")
async def judge_single(
    request: Request,
    body: JudgeRequest,
    judge: ProjectJudge | None = Depends(get_judge),
):
    judge = _require_judge(judge)
    try:
        score = await judge.judge_project(body.project)
    except JudgeError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return JudgeResponse(score=score)


@router.put("/judge", response_model=BatchJudgeResponse)
@limiter.limit("5/minute")
async def judge_many(
    request: Request,
    body: BatchJudgeRequest,
    judge: ProjectJudge | None = Depends(get_judge),
):
    judge = _require_judge(judge)
    result = await judge_batch(
        body.projects,
        judge,
        batch_size=settings.batch_size,
        delay_seconds=settings.batch_delay_seconds,
    )
    return BatchJudgeResponse(
        results=result.results,
        errors=result.errors,
        total=result.total,
        successful=result.successful,
        failed=result.failed,
    )
