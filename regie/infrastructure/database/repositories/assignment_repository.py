"""Assignment repository implementation."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from regie.domain.shared.exceptions import DuplicateAssignmentError
from regie.domain.staffing.entities.assignment import Assignment
from regie.domain.staffing.repositories.assignment_repository import (
    AssignmentRepository as AssignmentRepositoryInterface,
)
from regie.domain.staffing.value_objects.enums import AssignmentStatus

from ..mappers import AssignmentMapper
from ..models import Assignment as SQLAssignment
from .base import BaseRepository


class AssignmentRepository(BaseRepository[SQLAssignment], AssignmentRepositoryInterface):
    model = SQLAssignment
    entity_type = "assignment"

    def add(self, assignment: Assignment) -> Assignment:
        try:
            self.session.add(AssignmentMapper.domain_to_sql(assignment))
            self.session.flush()
        except IntegrityError as e:
            # Lost the race against another insert of the same pair
            raise DuplicateAssignmentError(
                assignment.event_id, assignment.worker_id
            ) from e
        self._track(assignment)
        return assignment

    def get(self, assignment_id: UUID) -> Assignment | None:
        row = self._get_row(assignment_id)
        return AssignmentMapper.sql_to_domain(row) if row else None

    def get_for_worker(self, event_id: UUID, worker_id: UUID) -> Assignment | None:
        statement = select(SQLAssignment).where(
            SQLAssignment.event_id == event_id,
            SQLAssignment.worker_id == worker_id,
        )
        rows = self._exec_all(statement)
        return AssignmentMapper.sql_to_domain(rows[0]) if rows else None

    def list_for_event(
        self, event_id: UUID, status: AssignmentStatus | None = None
    ) -> list[Assignment]:
        statement = select(SQLAssignment).where(SQLAssignment.event_id == event_id)
        if status is not None:
            statement = statement.where(SQLAssignment.status == status)
        statement = statement.order_by(SQLAssignment.created_at, SQLAssignment.id)
        return [AssignmentMapper.sql_to_domain(row) for row in self._exec_all(statement)]

    def list_for_worker(self, worker_id: UUID) -> list[Assignment]:
        statement = (
            select(SQLAssignment)
            .where(SQLAssignment.worker_id == worker_id)
            .order_by(SQLAssignment.created_at, SQLAssignment.id)
        )
        return [AssignmentMapper.sql_to_domain(row) for row in self._exec_all(statement)]

    def save(self, assignment: Assignment) -> Assignment:
        self._versioned_update(assignment, AssignmentMapper.columns(assignment))
        self._track(assignment)
        return assignment

    def delete_for_event(self, event_id: UUID) -> int:
        return self._delete_where(SQLAssignment.event_id == event_id)
