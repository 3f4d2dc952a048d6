"""
Post query value objects.

A PostQuery is a flat description of one SELECT: a filter specification,
an optional order clause, and optional limit/offset. PostRepository.find()
translates it to SQLAlchemy in the order a relational engine applies
them: filter, then order, then offset/limit.
"""

from dataclasses import dataclass, field
from typing import Optional

from exceptions import ValidationError
from models import POST_COLUMNS
from .specifications import MatchAllSpecification, Specification

ASC = 'asc'
DESC = 'desc'


@dataclass(frozen=True)
class OrderClause:
    """Sort by one Post column in one direction."""

    field: str
    direction: str = ASC

    def __post_init__(self):
        if self.field not in POST_COLUMNS:
            raise ValidationError(
                f"Cannot order by '{self.field}'",
                invalid_fields={"order": self.field},
            )
        if self.direction not in (ASC, DESC):
            raise ValidationError(
                f"Order direction must be '{ASC}' or '{DESC}', got '{self.direction}'",
                invalid_fields={"direction": self.direction},
            )

    @classmethod
    def parse(cls, value: str) -> "OrderClause":
        """
        Parse the query-string form of an order clause.

        A leading '-' means descending: '-id' sorts newest first, 'title'
        sorts A to Z.
        """
        value = value.strip()
        if value.startswith('-'):
            return cls(value[1:], DESC)
        return cls(value, ASC)

    @property
    def descending(self) -> bool:
        return self.direction == DESC


NEWEST_FIRST = OrderClause('id', DESC)


@dataclass(frozen=True)
class PostQuery:
    """Filter + order + limit/offset for one repository read."""

    filter: Specification = field(default_factory=MatchAllSpecification)
    order: Optional[OrderClause] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

    def __post_init__(self):
        if self.limit is not None and self.limit < 0:
            raise ValidationError("Limit must be non-negative", invalid_fields={"limit": self.limit})
        if self.offset is not None and self.offset < 0:
            raise ValidationError("Offset must be non-negative", invalid_fields={"offset": self.offset})
