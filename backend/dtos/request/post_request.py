"""
Post Request DTOs

DTOs for post-related API requests.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional


class NewPostRequest(BaseModel):
    """
    Request DTO for creating a post.

    The slug is always derived server-side from the title; a client that
    sends one (or an id) gets a 422.
    """

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "title": "First Post",
                "body": "Lorem ipsum"
            }
        },
    )

    title: str = Field(min_length=1, description="Post title")
    body: str = Field(description="Post body")


class PostUpdateRequest(BaseModel):
    """
    Request DTO for a partial post update.

    Only the fields present in the request are written. The slug cannot be
    changed and is not recomputed when the title changes.
    """

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, description="New title")
    body: Optional[str] = Field(None, description="New body")

    @model_validator(mode="after")
    def require_a_field(self):
        """Ensure at least one field is being set."""
        if not self.to_changes():
            raise ValueError("At least one of 'title' or 'body' must be provided")
        return self

    def to_changes(self) -> dict:
        """Fields the client actually sent, minus explicit nulls."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
