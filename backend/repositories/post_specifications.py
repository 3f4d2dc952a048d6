"""
Post filters used by the repository and the HTTP routes.
"""

from models import Post
from .specifications import Specification


class PostBySlugSpec(Specification):
    """Posts whose slug equals a value exactly (case-sensitive)."""

    def __init__(self, slug: str):
        self.slug = slug

    def to_sql_filter(self):
        return Post.slug == self.slug

    def __repr__(self):
        return f"PostBySlug({self.slug!r})"


class PostSlugLikeSpec(Specification):
    """Posts whose slug matches a LIKE pattern."""

    def __init__(self, pattern: str):
        """
        Args:
            pattern: SQL LIKE pattern, e.g. '%-post%'. `%` matches any run of
                     characters and `_` exactly one; case folding follows the
                     database (SQLite ignores ASCII case, PostgreSQL does not).
        """
        self.pattern = pattern

    def to_sql_filter(self):
        return Post.slug.like(self.pattern)

    def __repr__(self):
        return f"PostSlugLike({self.pattern!r})"
