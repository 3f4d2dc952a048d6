"""
Post repository: the only code that issues statements against the posts table.

Every public method is one statement (plus a read-back for update). Writes
are committed individually; there is no multi-statement transaction.
"""

import logging
from typing import List, Mapping, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from domain.value_objects.slug import slugify
from dtos.request.post_request import NewPostRequest
from exceptions import NotFoundError, ValidationError
from models import Post, SimplifiedPost, UPDATABLE_COLUMNS
from .base_repository import BaseRepository
from .post_specifications import PostBySlugSpec, PostSlugLikeSpec
from .query import OrderClause, PostQuery
from .specifications import Specification

logger = logging.getLogger(__name__)


class PostRepository(BaseRepository[Post]):
    """Repository for Post model operations."""

    def __init__(self, db: Session):
        super().__init__(db, Post)

    # ── CREATE ────────────────────────────────────────────

    def create(self, new_post: NewPostRequest) -> Post:
        """
        Insert a new post, deriving its slug from the title.

        Args:
            new_post: Title and body supplied by the client

        Returns:
            The inserted Post with its server-assigned id

        Raises:
            DatabaseError: On constraint violation or connection failure
        """
        post = Post(title=new_post.title, body=new_post.body, slug=slugify(new_post.title))

        def work():
            self.db.add(post)
            self.db.flush()
            return post

        self._run("create", work, commit=True)
        logger.info(f"Created post #{post.id} with slug '{post.slug}'")
        return post

    # ── READ ──────────────────────────────────────────────

    def find(self, query: PostQuery) -> List[Post]:
        """
        Run a PostQuery: filter, then order, then offset/limit.

        Args:
            query: Query value object

        Returns:
            Matching posts
        """
        stmt = select(Post).where(query.filter.to_sql_filter())
        stmt = self._apply_paging(stmt, query)
        return self._run("find", lambda: list(self.db.scalars(stmt).all()))

    def list_all(
        self,
        order: Optional[OrderClause] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Post]:
        """
        Get every post, optionally ordered and capped.

        Args:
            order: Sort clause, e.g. OrderClause('id', 'desc')
            limit: Maximum number of posts returned
            offset: Number of posts skipped after ordering

        Returns:
            List of posts
        """
        return self.find(PostQuery(order=order, limit=limit, offset=offset))

    def list_projected(
        self,
        order: Optional[OrderClause] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[SimplifiedPost]:
        """
        Same rows as list_all(), selecting only the title and body columns.

        Returns:
            List of SimplifiedPost tuples
        """
        query = PostQuery(order=order, limit=limit, offset=offset)
        stmt = self._apply_paging(select(Post.title, Post.body), query)
        return self._run(
            "list_projected",
            lambda: [SimplifiedPost(row.title, row.body) for row in self.db.execute(stmt)],
        )

    def find_by_slug(self, slug: str) -> List[Post]:
        """
        Get posts whose slug equals `slug` exactly.

        Returns:
            Zero or more posts; an empty list is not an error
        """
        return self.find(PostQuery(filter=PostBySlugSpec(slug), order=OrderClause('id')))

    def find_by_partial_slug(self, pattern: str) -> List[Post]:
        """
        Get posts whose slug matches a LIKE pattern.

        Args:
            pattern: SQL LIKE pattern, e.g. '%-post%'

        Returns:
            Matching posts ordered by id
        """
        return self.find(PostQuery(filter=PostSlugLikeSpec(pattern), order=OrderClause('id')))

    # ── UPDATE ────────────────────────────────────────────

    def update(self, post_id: int, fields: Mapping[str, str]) -> Post:
        """
        Set the supplied fields on one post.

        The slug is left as it was at creation, even when the title changes.

        Args:
            post_id: Primary key
            fields: Column values to set; only 'title' and 'body' are accepted

        Returns:
            The updated post

        Raises:
            ValidationError: If fields is empty or names a column that cannot be set
            NotFoundError: If no post has that id
            DatabaseError: If the statement fails
        """
        changes = self._validate_changes(fields)
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )

        def work():
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                raise NotFoundError("Post", post_id)
            return result

        try:
            self._run("update", work, commit=True)
        except NotFoundError:
            self.db.rollback()
            raise
        logger.info(f"Updated post #{post_id}: {', '.join(sorted(changes))}")

        post = self._run(
            "update",
            lambda: self.db.get(Post, post_id, populate_existing=True),
        )
        if post is None:
            # Deleted by a concurrent request between the update and the read-back
            raise NotFoundError("Post", post_id)
        return post

    # ── DELETE ────────────────────────────────────────────

    def delete_matching(self, spec: Specification) -> int:
        """
        Delete every post satisfying a specification.

        Args:
            spec: Filter, e.g. PostSlugLikeSpec('%-post%')

        Returns:
            Number of posts removed (0 when nothing matched)
        """
        stmt = (
            delete(Post)
            .where(spec.to_sql_filter())
            .execution_options(synchronize_session=False)
        )
        result = self._run("delete_matching", lambda: self.db.execute(stmt), commit=True)
        deleted = result.rowcount
        if deleted:
            logger.info(f"Deleted {deleted} post(s) matching {spec!r}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _apply_paging(stmt, query: PostQuery):
        if query.order is not None:
            column = getattr(Post, query.order.field)
            stmt = stmt.order_by(column.desc() if query.order.descending else column.asc())
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        return stmt

    @staticmethod
    def _validate_changes(fields: Mapping[str, str]) -> dict:
        if not fields:
            raise ValidationError("No fields to update")
        rejected = {key: "cannot be set" for key in fields if key not in UPDATABLE_COLUMNS}
        rejected.update({key: "must not be null" for key, value in fields.items()
                         if key in UPDATABLE_COLUMNS and value is None})
        if rejected:
            raise ValidationError(
                f"Invalid update fields: {', '.join(sorted(rejected))}",
                invalid_fields=rejected,
            )
        return dict(fields)
