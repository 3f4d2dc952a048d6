"""
Query filters.

A specification is the WHERE half of a PostQuery: one object per supported
criterion, each rendering itself as a SQLAlchemy expression. Matching is
always done by the database, so backend rules (e.g. LIKE case folding on
SQLite) apply unchanged.
"""

from abc import ABC, abstractmethod

from sqlalchemy import true


class Specification(ABC):
    """A single filter criterion for repository reads and bulk deletes."""

    @abstractmethod
    def to_sql_filter(self):
        """
        Convert specification to SQLAlchemy filter expression.

        Returns:
            SQLAlchemy filter expression
        """


class MatchAllSpecification(Specification):
    """Matches every row (WHERE true)."""

    def to_sql_filter(self):
        return true()

    def __repr__(self):
        return "MatchAll()"
