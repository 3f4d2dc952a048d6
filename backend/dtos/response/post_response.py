"""
Post Response DTOs

DTOs for post-related API responses.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class PostResponse(BaseModel):
    """
    Response DTO for a full post.

    This DTO separates the API response from the database model,
    allowing them to evolve independently.
    """

    model_config = ConfigDict(from_attributes=True)  # Allow creation from ORM models

    id: int = Field(description="Post ID")
    title: str = Field(description="Post title")
    slug: str = Field(description="URL identifier derived from the title")
    body: str = Field(description="Post body")


class SimplifiedPostResponse(BaseModel):
    """Response DTO for the title/body projection."""

    model_config = ConfigDict(from_attributes=True)

    title: str = Field(description="Post title")
    body: str = Field(description="Post body")


class DeleteResultResponse(BaseModel):
    """Response DTO for a bulk delete."""

    deleted: int = Field(description="Number of posts removed")


class PoolStatsResponse(BaseModel):
    """Connection pool usage as reported on the healthcheck."""

    model_config = ConfigDict(from_attributes=True)

    size: int
    max_overflow: int
    checked_out: int
    peak_checked_out: int
    total_checkouts: int


class HealthResponse(BaseModel):
    """Healthcheck payload."""

    status: str = Field(description="'ok' when the database answered")
    mode: str = Field(description="Deployment mode")
    posts: Optional[int] = Field(None, description="Number of stored posts")
    pool: PoolStatsResponse
