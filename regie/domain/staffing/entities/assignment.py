"""
Assignment Domain Entity

The relationship between one worker and one event, with the status machine
the worker and the scheduling authority drive it through.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from regie.core.rbac import Actor, Permission, require_permission

from ...shared.base import AggregateRoot, utcnow
from ...shared.exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    PermissionDeniedError,
    ValidationError,
)
from ..events import AssignmentStatusChanged
from ..value_objects.enums import WORKER_RESPONSES, AssignmentStatus, EventStatus

# Targets only team finalization or event completion may produce
_SYSTEM_ONLY_TARGETS = frozenset(
    {
        AssignmentStatus.VALIDATED,
        AssignmentStatus.NOT_RETAINED,
        AssignmentStatus.COMPLETED,
    }
)


class Assignment(AggregateRoot):
    """
    Assignment aggregate.

    ``pending_status`` remembers whether the worker was invited or proposed,
    so a revoke can return the record to where it started.
    """

    event_id: UUID
    worker_id: UUID
    status: AssignmentStatus = AssignmentStatus.PROPOSED
    pending_status: AssignmentStatus = AssignmentStatus.PROPOSED
    responded_at: datetime | None = None
    role_label: str | None = Field(None, max_length=100)
    notes: str | None = None

    @classmethod
    def create(
        cls,
        event_id: UUID,
        worker_id: UUID,
        status: AssignmentStatus = AssignmentStatus.PROPOSED,
        role_label: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> "Assignment":
        """
        Create an assignment in one of the pending states.

        Raises:
            ValidationError: If the initial status is not invited or proposed
        """
        if not status.is_pending:
            raise ValidationError(
                "status", status.value, "an assignment starts as invited or proposed"
            )
        return cls(
            event_id=event_id,
            worker_id=worker_id,
            status=status,
            pending_status=status,
            role_label=role_label,
            notes=notes,
            created_at=now or utcnow(),
        )

    def is_valid(self) -> bool:
        return self.pending_status.is_pending

    def respond(
        self,
        actor: Actor,
        target: AssignmentStatus,
        event_status: EventStatus,
        now: datetime | None = None,
    ) -> AssignmentStatus:
        """
        Record the worker's answer (available, uncertain or unavailable).

        Returns:
            The previous status

        Raises:
            InvalidTransitionError: For validated, not_retained or completed
                targets whoever asks, or for edges the worker may not take
            PermissionDeniedError: If the actor is not the assigned worker
            InvalidStateError: If the event is not published
        """
        if target in _SYSTEM_ONLY_TARGETS or target not in WORKER_RESPONSES:
            raise InvalidTransitionError(
                "assignment",
                self.id,
                self.status.value,
                target.value,
                "only the worker's availability can be set by a response",
            )
        return self._worker_transition(actor, target, event_status, now)

    def decline(
        self, actor: Actor, event_status: EventStatus, now: datetime | None = None
    ) -> AssignmentStatus:
        """
        Withdraw the worker from the event.

        Raises:
            PermissionDeniedError: If the actor is not the assigned worker
            InvalidStateError: If the event is not published
            InvalidTransitionError: If the current status cannot be declined
        """
        return self._worker_transition(actor, AssignmentStatus.DECLINED, event_status, now)

    def _worker_transition(
        self,
        actor: Actor,
        target: AssignmentStatus,
        event_status: EventStatus,
        now: datetime | None,
    ) -> AssignmentStatus:
        require_permission(actor, Permission.ASSIGNMENT_RESPOND, "respond to assignments")
        if actor.user_id != self.worker_id:
            raise PermissionDeniedError(
                actor.role.value,
                "respond to assignments",
                "only the assigned worker may respond",
            )
        if event_status != EventStatus.PUBLISHED:
            raise InvalidStateError("event", self.event_id, event_status.value, "respond")
        if not self.status.can_worker_transition_to(target):
            raise InvalidTransitionError(
                "assignment", self.id, self.status.value, target.value
            )

        now = now or utcnow()
        if self.status.is_pending and self.responded_at is None:
            self.responded_at = now
        return self._set_status(target, actor.user_id, now)

    def revoke(self, actor: Actor, now: datetime | None = None) -> bool:
        """
        Return the assignment to its pending state and clear the response time.

        Returns:
            False when the assignment was still pending (nothing to revoke)

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            InvalidTransitionError: If the assignment is completed
        """
        require_permission(actor, Permission.ASSIGNMENT_MANAGE, "revoke assignments")
        if self.status.is_terminal:
            raise InvalidTransitionError(
                "assignment",
                self.id,
                self.status.value,
                self.pending_status.value,
                "status is terminal",
            )
        if self.status.is_pending:
            return False

        now = now or utcnow()
        self.responded_at = None
        self._set_status(self.pending_status, actor.user_id, now)
        return True

    def mark_validated(self, actor_id: UUID, now: datetime | None = None) -> None:
        self._require_finalizable(AssignmentStatus.VALIDATED)
        self._set_status(AssignmentStatus.VALIDATED, actor_id, now or utcnow())

    def mark_not_retained(self, actor_id: UUID, now: datetime | None = None) -> None:
        self._require_finalizable(AssignmentStatus.NOT_RETAINED)
        self._set_status(AssignmentStatus.NOT_RETAINED, actor_id, now or utcnow())

    def mark_completed(self, actor_id: UUID, now: datetime | None = None) -> None:
        """Close a validated assignment once its event has completed."""
        if self.status != AssignmentStatus.VALIDATED:
            raise InvalidTransitionError(
                "assignment",
                self.id,
                self.status.value,
                AssignmentStatus.COMPLETED.value,
            )
        self._set_status(AssignmentStatus.COMPLETED, actor_id, now or utcnow())

    def _require_finalizable(self, target: AssignmentStatus) -> None:
        allowed = self.status.is_in_play or self.status.is_finalization_outcome
        if not allowed:
            raise InvalidTransitionError(
                "assignment", self.id, self.status.value, target.value
            )

    def _set_status(
        self, target: AssignmentStatus, actor_id: UUID, now: datetime
    ) -> AssignmentStatus:
        old_status = self.status
        self.status = target
        self.mark_updated(now)
        self.add_domain_event(
            AssignmentStatusChanged(
                aggregate_id=self.event_id,
                assignment_id=self.id,
                worker_id=self.worker_id,
                old_status=old_status,
                new_status=target,
                actor_id=actor_id,
                occurred_at=now,
            )
        )
        return old_status

    def __str__(self) -> str:
        return f"Assignment(worker={self.worker_id}, {self.status.value})"
