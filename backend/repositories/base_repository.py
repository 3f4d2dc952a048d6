"""
Base repository providing common data access helpers.
"""

import logging
from typing import Generic, TypeVar, Type

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from exceptions import DatabaseError, NotFoundError

T = TypeVar('T')

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Generic base repository.
    All specific repositories should inherit from this class.

    A repository works on the Session it was given and never opens or
    returns connections itself; the borrower of the pooled connection owns
    that lifecycle.
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize the repository.

        Args:
            db: SQLAlchemy session bound to a borrowed connection
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    def get_by_id(self, id: int) -> T:
        """
        Retrieve a record by its ID.

        Args:
            id: Primary key value

        Returns:
            Model instance

        Raises:
            NotFoundError: If no row has that ID
        """
        obj = self._run("get_by_id", lambda: self.db.get(self.model, id))
        if obj is None:
            raise NotFoundError(self.model.__name__, id)
        return obj

    def count(self) -> int:
        """
        Count total records.

        Returns:
            Total number of records
        """
        stmt = select(func.count()).select_from(self.model)
        return self._run("count", lambda: self.db.execute(stmt).scalar_one())

    def _run(self, operation: str, work, commit: bool = False):
        """
        Execute one unit of database work.

        SQLAlchemy failures are rolled back and re-raised as DatabaseError.
        Nothing is retried.

        Args:
            operation: Name used in logs and error details
            work: Zero-argument callable issuing the statement
            commit: Commit after the statement succeeds

        Returns:
            Whatever work() returns
        """
        try:
            result = work()
            if commit:
                self.db.commit()
            return result
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{self.model.__name__}.{operation} failed: {e}", exc_info=True)
            raise DatabaseError(operation, f"{operation} failed: {getattr(e, 'orig', None) or e}") from e
