"""
Server-rendered pages and the healthcheck
"""
from fastapi import APIRouter, Depends, Request

from constants import DeploymentMode, TemplateNames
from database import ConnectionPool
from dependencies import get_pool, get_post_repository
from dtos.response.post_response import HealthResponse, PoolStatsResponse, PostResponse
from exceptions import NotFoundError
from repositories.post_repository import PostRepository
from repositories.query import NEWEST_FIRST
from utils.error_handlers import handle_api_errors

router = APIRouter()


def _health(request: Request, repo: PostRepository, pool: ConnectionPool) -> HealthResponse:
    return HealthResponse(
        status="ok",
        mode=request.app.state.settings.mode.value,
        posts=repo.count(),
        pool=PoolStatsResponse.model_validate(pool.stats()),
    )


@router.get("/")
@handle_api_errors("Index")
def index(
    request: Request,
    repo: PostRepository = Depends(get_post_repository),
    pool: ConnectionPool = Depends(get_pool),
):
    """Index page in site mode, JSON healthcheck in API mode."""
    if request.app.state.settings.mode == DeploymentMode.API:
        return _health(request, repo, pool)

    posts = [PostResponse.model_validate(p) for p in repo.list_all(order=NEWEST_FIRST)]
    return request.app.state.templates.TemplateResponse(
        request, TemplateNames.INDEX, {"posts": posts}
    )


@router.get("/health", response_model=HealthResponse)
@handle_api_errors("Healthcheck")
def health(
    request: Request,
    repo: PostRepository = Depends(get_post_repository),
    pool: ConnectionPool = Depends(get_pool),
):
    """Database round-trip plus pool usage."""
    return _health(request, repo, pool)


@router.get("/post/{slug}")
@handle_api_errors("Show post")
def show_post(
    slug: str,
    request: Request,
    repo: PostRepository = Depends(get_post_repository),
):
    """Render one post looked up by slug."""
    matches = repo.find_by_slug(slug)
    if not matches:
        raise NotFoundError("Post", slug)
    return request.app.state.templates.TemplateResponse(
        request, TemplateNames.POST, {"post": PostResponse.model_validate(matches[0])}
    )
