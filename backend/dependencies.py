"""
Dependency injection providers for FastAPI.

This module provides factory functions for borrowing a pooled connection and
building repositories on top of it. The pool itself is created once by
main.create_app() and stored on app.state; nothing here reaches for a
module-level engine, so tests can hand the app any pool they like.

Route functions that depend on these are plain `def`, so FastAPI runs the
borrow-and-query work in its threadpool instead of on the event loop.
"""

from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from database import ConnectionPool
from repositories.post_repository import PostRepository


def get_pool(request: Request) -> ConnectionPool:
    """
    Return the pool the running app was built with.

    Args:
        request: Incoming request

    Returns:
        ConnectionPool instance
    """
    return request.app.state.pool


def get_db(pool: ConnectionPool = Depends(get_pool)) -> Iterator[Session]:
    """
    Borrow one connection for the lifetime of the request.

    The connection is returned when the response is done, including when
    the route raised or the client went away.
    """
    with pool.acquire() as session:
        yield session


def get_post_repository(db: Session = Depends(get_db)) -> PostRepository:
    """
    Factory function for creating PostRepository instances.

    Args:
        db: Database session (injected)

    Returns:
        PostRepository instance
    """
    return PostRepository(db)
