"""
Assignment Repository Interface

Defines the contract for assignment data access operations.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from ...shared.exceptions import EntityNotFoundError
from ..entities.assignment import Assignment
from ..value_objects.enums import AssignmentStatus


class AssignmentRepository(ABC):
    """Abstract repository interface for Assignment aggregates."""

    @abstractmethod
    def add(self, assignment: Assignment) -> Assignment:
        """
        Insert a new assignment.

        Raises:
            DuplicateAssignmentError: If the (event, worker) pair already exists
        """

    @abstractmethod
    def get(self, assignment_id: UUID) -> Assignment | None:
        pass

    def get_required(self, assignment_id: UUID) -> Assignment:
        """
        Raises:
            EntityNotFoundError: If the assignment does not exist
        """
        assignment = self.get(assignment_id)
        if assignment is None:
            raise EntityNotFoundError("assignment", assignment_id)
        return assignment

    @abstractmethod
    def get_for_worker(self, event_id: UUID, worker_id: UUID) -> Assignment | None:
        """Retrieve the assignment of a worker on an event, if any."""

    @abstractmethod
    def list_for_event(
        self, event_id: UUID, status: AssignmentStatus | None = None
    ) -> list[Assignment]:
        pass

    @abstractmethod
    def list_for_worker(self, worker_id: UUID) -> list[Assignment]:
        pass

    @abstractmethod
    def save(self, assignment: Assignment) -> Assignment:
        """
        Persist changes to an existing assignment.

        Raises:
            ConcurrentModificationError: If the stored version moved on
        """

    @abstractmethod
    def delete_for_event(self, event_id: UUID) -> int:
        pass
