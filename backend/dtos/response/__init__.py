"""
Response DTOs

DTOs for outgoing API responses. These decouple the API from database models
and provide a clear contract for what data the API returns.

Benefits:
- Hide internal database structure
- Control exactly what data is exposed
- Version API responses independently
"""

from .post_response import (
    DeleteResultResponse,
    HealthResponse,
    PoolStatsResponse,
    PostResponse,
    SimplifiedPostResponse,
)

__all__ = [
    "DeleteResultResponse",
    "HealthResponse",
    "PoolStatsResponse",
    "PostResponse",
    "SimplifiedPostResponse",
]
