"""
Repository layer for data access abstraction.

This package contains repository classes that encapsulate database queries
and provide a clean interface for data access operations.
"""

from .base_repository import BaseRepository
from .post_repository import PostRepository
from .post_specifications import PostBySlugSpec, PostSlugLikeSpec
from .query import NEWEST_FIRST, OrderClause, PostQuery

__all__ = [
    "BaseRepository",
    "PostRepository",
    "PostBySlugSpec",
    "PostSlugLikeSpec",
    "NEWEST_FIRST",
    "OrderClause",
    "PostQuery",
]
