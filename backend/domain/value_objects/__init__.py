"""
Domain Value Objects

Value objects are immutable types that represent descriptive aspects of the domain.
They have no conceptual identity and are compared by their values, not by ID.

Examples:
- slug: URL-safe identifier derived from a post title
"""

from .slug import slugify

__all__ = ["slugify"]
