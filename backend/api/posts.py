"""
Post JSON API endpoints
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from dependencies import get_post_repository
from dtos.request.post_request import NewPostRequest, PostUpdateRequest
from dtos.response.post_response import DeleteResultResponse, PostResponse, SimplifiedPostResponse
from repositories.post_repository import PostRepository
from repositories.post_specifications import PostSlugLikeSpec
from repositories.query import OrderClause
from utils.error_handlers import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostResponse])
@handle_api_errors("List posts")
def list_posts(
    order: Optional[str] = Query(None, description="Column to sort by: id, title, slug, body. Prefix with - for desc"),
    limit: Optional[int] = Query(None, ge=0, description="Maximum number of posts"),
    offset: Optional[int] = Query(None, ge=0, description="Posts to skip after ordering"),
    repo: PostRepository = Depends(get_post_repository),
):
    """Every post, optionally ordered and capped."""
    order_clause = OrderClause.parse(order) if order else None
    posts = repo.list_all(order=order_clause, limit=limit, offset=offset)
    return [PostResponse.model_validate(p) for p in posts]


@router.get("/posts/simplified", response_model=List[SimplifiedPostResponse])
@handle_api_errors("List simplified posts")
def list_simplified_posts(
    order: Optional[str] = Query(None, description="Sort key, prefix with - for desc"),
    limit: Optional[int] = Query(None, ge=0),
    repo: PostRepository = Depends(get_post_repository),
):
    """Title and body of every post, without id or slug."""
    order_clause = OrderClause.parse(order) if order else None
    rows = repo.list_projected(order=order_clause, limit=limit)
    return [SimplifiedPostResponse(title=row.title, body=row.body) for row in rows]


@router.get("/posts/search", response_model=List[PostResponse])
@handle_api_errors("Search posts")
def search_posts(
    slug_like: str = Query(..., min_length=1, description="SQL LIKE pattern, e.g. %-post%"),
    repo: PostRepository = Depends(get_post_repository),
):
    """Posts whose slug matches a wildcard pattern."""
    return [PostResponse.model_validate(p) for p in repo.find_by_partial_slug(slug_like)]


@router.post("/posts/new", response_model=PostResponse)
@handle_api_errors("Create post")
def create_post(
    new_post: NewPostRequest,
    repo: PostRepository = Depends(get_post_repository),
):
    """Create a post; the slug is derived from the title."""
    post = repo.create(new_post)
    return PostResponse.model_validate(post)


@router.patch("/posts/{post_id}", response_model=PostResponse)
@handle_api_errors("Update post")
def update_post(
    post_id: int,
    changes: PostUpdateRequest,
    repo: PostRepository = Depends(get_post_repository),
):
    """Set the supplied fields on one post. The slug never changes."""
    post = repo.update(post_id, changes.to_changes())
    return PostResponse.model_validate(post)


@router.delete("/posts", response_model=DeleteResultResponse)
@handle_api_errors("Delete posts")
def delete_posts(
    slug_like: str = Query(..., min_length=1, description="SQL LIKE pattern selecting posts to delete"),
    repo: PostRepository = Depends(get_post_repository),
):
    """Delete every post whose slug matches the pattern."""
    deleted = repo.delete_matching(PostSlugLikeSpec(slug_like))
    logger.info(f"Bulk delete '{slug_like}' removed {deleted} post(s)")
    return DeleteResultResponse(deleted=deleted)
