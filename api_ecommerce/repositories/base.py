# ==============================================================================
# BASE REPOSITORY - Common access to the relational store
# ==============================================================================

import logging
from abc import ABC
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from api_ecommerce.errors import PersistenceFailure
from api_ecommerce.extensions import db

T = TypeVar('T')


class BaseRepository(ABC):
    """
    Base class for every repository.

    Repositories only do persistence: queries and single-aggregate writes.
    Validation and business rules live in the services.

    The session is Flask-SQLAlchemy's scoped session, bound to the current
    application context, so each request (or worker thread with its own
    app context) gets its own session and connection.
    """

    def __init__(self, session_factory: Callable[[], Session] = None):
        """
        Args:
            session_factory: Returns the session to use (defaults to db.session)
        """
        self._session_factory = session_factory

    @property
    def session(self) -> Session:
        if self._session_factory is not None:
            return self._session_factory()
        return db.session

    def _commit(self, action: str) -> None:
        """
        Commits the unit of work.

        Raises:
            PersistenceFailure: If the store rejects the write (after rollback)
        """
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            self._logger().error("Store rejected %s: %s", action, e)
            raise PersistenceFailure(f'Something went wrong when {action}') from e

    def _commit_unique(self, action: str, conflict: Callable[[], bool]) -> bool:
        """
        Commits a write guarded by a unique index.

        Args:
            action: What is being saved (for logs and the error message)
            conflict: Called after rollback; True if the row now clashes
                with an existing one

        Returns:
            True when committed, False when the unique index rejected it

        Raises:
            PersistenceFailure: Any other rejection (after rollback)
        """
        try:
            self.session.commit()
            return True
        except IntegrityError as e:
            self.session.rollback()
            if conflict():
                self._logger().info("Unique index rejected %s", action)
                return False
            self._logger().error("Store rejected %s: %s", action, e)
            raise PersistenceFailure(f'Something went wrong when {action}') from e
        except SQLAlchemyError as e:
            self.session.rollback()
            self._logger().error("Store rejected %s: %s", action, e)
            raise PersistenceFailure(f'Something went wrong when {action}') from e

    def _run(self, action: str, fn: Callable[[], T]) -> T:
        """Runs a read and wraps driver errors the same way as writes."""
        try:
            return fn()
        except SQLAlchemyError as e:
            self.session.rollback()
            self._logger().error("Store failed while %s: %s", action, e)
            raise PersistenceFailure(f'Something went wrong when {action}') from e

    def _logger(self) -> logging.Logger:
        return logging.getLogger(type(self).__module__)
