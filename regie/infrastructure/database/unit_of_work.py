"""
Unit of Work implementation for managing transactions across repositories.

One unit of work is one transaction: it commits when the block exits
normally and rolls back when any exception escapes. Domain events collected
from the aggregates written in the block are published only after a
successful commit.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from regie.core.db import get_engine, session_factory
from regie.core.observability import get_logger
from regie.domain.shared.base import AggregateRoot
from regie.domain.staffing.repositories import (
    AssignmentRepository as AssignmentRepositoryInterface,
)
from regie.domain.staffing.repositories import (
    EventRepository as EventRepositoryInterface,
)
from regie.domain.staffing.repositories import (
    HistoryRepository as HistoryRepositoryInterface,
)
from regie.domain.staffing.repositories import (
    ScheduleRepository as ScheduleRepositoryInterface,
)
from regie.infrastructure.events.domain_event_publisher import DomainEventPublisher

from .repositories import (
    AssignmentRepository,
    DatabaseError,
    EventRepository,
    HistoryRepository,
    ScheduleRepository,
)

logger = get_logger(__name__)


class UnitOfWorkInterface(ABC):
    """
    Abstract base class for Unit of Work pattern.

    Defines the interface for coordinating transactions across multiple repositories.
    """

    events: EventRepositoryInterface
    schedules: ScheduleRepositoryInterface
    assignments: AssignmentRepositoryInterface
    history: HistoryRepositoryInterface

    @abstractmethod
    def __enter__(self) -> "UnitOfWorkInterface":
        pass

    @abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass


class SqlModelUnitOfWork(UnitOfWorkInterface):
    """
    SQLModel-based implementation of Unit of Work pattern.

    Manages database transactions using SQLModel/SQLAlchemy sessions and provides
    access to all repositories within a single transactional boundary.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] | None = None,
        publisher: DomainEventPublisher | None = None,
    ):
        """
        Initialize the unit of work.

        Args:
            session_factory: Optional session factory. If None, uses the default engine.
            publisher: Publisher for domain events raised in the transaction
        """
        self._session_factory = session_factory
        self._publisher = publisher or DomainEventPublisher()
        self._session: Session | None = None
        self._seen: list[AggregateRoot] = []

    def __enter__(self) -> "SqlModelUnitOfWork":
        factory = self._session_factory or session_factory(get_engine())
        self._session = factory()
        self._seen = []

        self.events = EventRepository(self._session, self._seen)
        self.schedules = ScheduleRepository(self._session, self._seen)
        self.assignments = AssignmentRepository(self._session, self._seen)
        self.history = HistoryRepository(self._session, self._seen)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        committed = False
        try:
            if exc_type is not None:
                self.rollback()
            else:
                self.commit()
                committed = True
        finally:
            if self._session:
                self._session.close()
                self._session = None

        if committed:
            self._publish_collected_events()
        else:
            for aggregate in self._seen:
                aggregate.clear_domain_events()
        self._seen = []

    def commit(self) -> None:
        """
        Commit the current transaction.

        Raises:
            DatabaseError: If commit fails
        """
        if not self._session:
            raise DatabaseError("No active session to commit")

        try:
            self._session.commit()
        except SQLAlchemyError as e:
            self.rollback()
            raise DatabaseError(f"Failed to commit transaction: {str(e)}") from e

    def rollback(self) -> None:
        """
        Rollback the current transaction.

        Raises:
            DatabaseError: If rollback fails
        """
        if not self._session:
            raise DatabaseError("No active session to rollback")

        try:
            self._session.rollback()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to rollback transaction: {str(e)}") from e

    @property
    def session(self) -> Session:
        if not self._session:
            raise DatabaseError("No active database session")
        return self._session

    def _publish_collected_events(self) -> None:
        for aggregate in self._seen:
            self._publisher.publish_events(aggregate)


class UnitOfWorkManager:
    """
    Factory for Unit of Work instances sharing one session factory and publisher.

    Application services receive ``manager.create_unit_of_work`` as their
    unit-of-work factory.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] | None = None,
        publisher: DomainEventPublisher | None = None,
    ):
        self._session_factory = session_factory
        self._publisher = publisher or DomainEventPublisher()

    @property
    def publisher(self) -> DomainEventPublisher:
        return self._publisher

    def create_unit_of_work(self) -> SqlModelUnitOfWork:
        return SqlModelUnitOfWork(self._session_factory, self._publisher)

    def __call__(self) -> SqlModelUnitOfWork:
        return self.create_unit_of_work()


_uow_manager: UnitOfWorkManager | None = None


def get_unit_of_work_manager() -> UnitOfWorkManager:
    """Get the global Unit of Work manager instance."""
    global _uow_manager
    if _uow_manager is None:
        _uow_manager = UnitOfWorkManager()
    return _uow_manager


UnitOfWorkFactory = Callable[[], UnitOfWorkInterface]

__all__ = [
    "SqlModelUnitOfWork",
    "UnitOfWorkFactory",
    "UnitOfWorkInterface",
    "UnitOfWorkManager",
    "get_unit_of_work_manager",
]
