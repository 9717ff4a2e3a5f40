"""
Assignment application service.

Drives the per-worker assignment workflow and team finalization. Each write
also saves the parent event, so concurrent responses or finalizations on the
same event are serialized by the event's version check.
"""

from collections import Counter
from uuid import UUID

from regie.core.rbac import Actor, Permission, require_permission
from regie.domain.shared.exceptions import (
    DuplicateAssignmentError,
    EntityNotFoundError,
    PermissionDeniedError,
)
from regie.domain.staffing.entities.assignment import Assignment
from regie.domain.staffing.events import TeamFinalized
from regie.domain.staffing.services.team_finalization import (
    apply_finalization,
    plan_finalization,
)
from regie.domain.staffing.value_objects.enums import AssignmentStatus, HistoryAction

from ..dtos.assignment_dtos import (
    AssignmentResponse,
    FinalizationResponse,
    TeamSummaryResponse,
)
from .base_service import ApplicationServiceBase


class AssignmentService(ApplicationServiceBase):
    """Application service for assignments and team finalization."""

    def create_assignment(
        self,
        actor: Actor,
        event_id: UUID,
        worker_id: UUID,
        role_label: str | None = None,
        status: AssignmentStatus = AssignmentStatus.PROPOSED,
        notes: str | None = None,
    ) -> AssignmentResponse:
        """
        Propose or invite a worker for an event.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the event does not exist
            InvalidStateError: If the event is terminal
            DuplicateAssignmentError: If the worker already has an assignment
            ValidationError: If the status is not invited or proposed
        """
        require_permission(actor, Permission.ASSIGNMENT_MANAGE, "create assignments")
        with self._uow_factory() as uow:
            event = uow.events.get_required(event_id)
            event.ensure_writable("create assignment")

            if uow.assignments.get_for_worker(event.id, worker_id) is not None:
                raise DuplicateAssignmentError(event.id, worker_id)

            with self.validating():
                assignment = Assignment.create(
                    event.id,
                    worker_id,
                    status=status,
                    role_label=role_label,
                    notes=notes,
                    now=self.now(),
                )
            uow.assignments.add(assignment)
            uow.events.save(event)

        self._logger.info(
            "assignment_created",
            assignment_id=str(assignment.id),
            event_id=str(event_id),
            worker_id=str(worker_id),
            status=assignment.status.value,
        )
        return AssignmentResponse.from_entity(assignment)

    def respond_to_assignment(
        self, actor: Actor, assignment_id: UUID, response: AssignmentStatus
    ) -> AssignmentResponse:
        """
        Record a worker's availability answer.

        Raises:
            EntityNotFoundError: If the assignment does not exist
            InvalidTransitionError: For validated, not_retained or completed
                targets, or an edge the worker may not take
            PermissionDeniedError: If the actor is not the assigned worker
            InvalidStateError: If the event is not published
        """
        with self._uow_factory() as uow:
            assignment = uow.assignments.get_required(assignment_id)
            event = uow.events.get_required(assignment.event_id)
            old_status = assignment.respond(actor, response, event.status, self.now())
            uow.assignments.save(assignment)
            uow.events.save(event)

        self._log_transition(assignment, old_status, actor)
        return AssignmentResponse.from_entity(assignment)

    def decline_assignment(self, actor: Actor, assignment_id: UUID) -> AssignmentResponse:
        """
        Let the worker withdraw from the event.

        Raises:
            EntityNotFoundError: If the assignment does not exist
            PermissionDeniedError: If the actor is not the assigned worker
            InvalidStateError: If the event is not published
            InvalidTransitionError: If the current status cannot be declined
        """
        with self._uow_factory() as uow:
            assignment = uow.assignments.get_required(assignment_id)
            event = uow.events.get_required(assignment.event_id)
            old_status = assignment.decline(actor, event.status, self.now())
            uow.assignments.save(assignment)
            uow.events.save(event)

        self._log_transition(assignment, old_status, actor)
        return AssignmentResponse.from_entity(assignment)

    def revoke_assignment(self, actor: Actor, assignment_id: UUID) -> AssignmentResponse:
        """
        Re-open an assignment: back to its pending status, response time cleared.

        Revoking an assignment that is still pending changes nothing.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the assignment does not exist
            InvalidStateError: If the event is terminal
            InvalidTransitionError: If the assignment is completed
        """
        require_permission(actor, Permission.ASSIGNMENT_MANAGE, "revoke assignments")
        now = self.now()
        with self._uow_factory() as uow:
            assignment = uow.assignments.get_required(assignment_id)
            event = uow.events.get_required(assignment.event_id)
            event.ensure_writable("revoke assignment")

            old_status = assignment.status
            if not assignment.revoke(actor, now):
                return AssignmentResponse.from_entity(assignment)

            uow.assignments.save(assignment)
            event.record_history(
                HistoryAction.ASSIGNMENT_REVOKED,
                actor,
                now,
                {
                    "assignment_id": str(assignment.id),
                    "worker_id": str(assignment.worker_id),
                    "from": old_status.value,
                    "to": assignment.status.value,
                },
            )
            uow.events.save(event)

        self._log_transition(assignment, old_status, actor)
        return AssignmentResponse.from_entity(assignment)

    def finalize_team(
        self, actor: Actor, event_id: UUID, selected_ids: list[UUID]
    ) -> FinalizationResponse:
        """
        Split the event's assignments into the validated team and the rest.

        The split is planned before anything is written. A selection that
        matches the current team changes nothing and records no history.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the event does not exist
            InvalidStateError: If the event is terminal
            EmptySelectionError: If nothing is selected
            InvalidCandidateError: If a selected id is foreign or not selectable
        """
        require_permission(actor, Permission.TEAM_FINALIZE, "finalize teams")
        now = self.now()
        with self._uow_factory() as uow:
            event = uow.events.get_required(event_id)
            assignments = uow.assignments.list_for_event(event.id)
            plan = plan_finalization(event, assignments, selected_ids)

            if plan.is_noop:
                self._logger.info(
                    "team_finalization_noop",
                    event_id=str(event.id),
                    team_size=len(plan.validated_ids),
                )
                return FinalizationResponse(
                    event_id=event.id,
                    changed=False,
                    validated_ids=plan.validated_ids,
                    not_retained_ids=[],
                )

            for assignment in apply_finalization(plan, actor.user_id, now):
                uow.assignments.save(assignment)

            event.record_history(HistoryAction.TEAM_FINALIZED, actor, now, plan.summary())
            event.add_domain_event(
                TeamFinalized(
                    aggregate_id=event.id,
                    validated_ids=plan.validated_ids,
                    not_retained_ids=plan.not_retained_ids,
                    actor_id=actor.user_id,
                    occurred_at=now,
                )
            )
            uow.events.save(event)

        self._logger.info(
            "team_finalized",
            event_id=str(event_id),
            validated=len(plan.validated_ids),
            not_retained=len(plan.not_retained_ids),
        )
        return FinalizationResponse(
            event_id=event_id,
            changed=True,
            validated_ids=plan.validated_ids,
            not_retained_ids=plan.not_retained_ids,
        )

    def get_assignment(self, actor: Actor, assignment_id: UUID) -> AssignmentResponse:
        """
        Raises:
            EntityNotFoundError: If the assignment does not exist
            PermissionDeniedError: If a worker asks for someone else's assignment
        """
        require_permission(actor, Permission.ASSIGNMENT_READ, "view assignments")
        with self._uow_factory() as uow:
            assignment = uow.assignments.get_required(assignment_id)
        if not actor.is_scheduling_authority and assignment.worker_id != actor.user_id:
            raise PermissionDeniedError(
                actor.role.value, "view assignments", "not your assignment"
            )
        return AssignmentResponse.from_entity(assignment)

    def list_assignments(
        self,
        actor: Actor,
        event_id: UUID,
        status: AssignmentStatus | None = None,
    ) -> list[AssignmentResponse]:
        """List an event's assignments; workers only see their own."""
        require_permission(actor, Permission.ASSIGNMENT_READ, "view assignments")
        with self._uow_factory() as uow:
            self.load_visible_event(uow, actor, event_id)
            assignments = uow.assignments.list_for_event(event_id, status)
        if not actor.is_scheduling_authority:
            assignments = [a for a in assignments if a.worker_id == actor.user_id]
        return [AssignmentResponse.from_entity(a) for a in assignments]

    def list_worker_assignments(self, actor: Actor) -> list[AssignmentResponse]:
        """The acting worker's assignments across events."""
        require_permission(actor, Permission.ASSIGNMENT_READ, "view assignments")
        with self._uow_factory() as uow:
            assignments = uow.assignments.list_for_worker(actor.user_id)
        return [AssignmentResponse.from_entity(a) for a in assignments]

    def team_summary(self, actor: Actor, event_id: UUID) -> TeamSummaryResponse:
        """
        Count assignments per status.

        The team counts as finalized once at least one assignment is
        validated (or completed, after the event).
        """
        require_permission(actor, Permission.ASSIGNMENT_MANAGE, "view team summary")
        with self._uow_factory() as uow:
            event = uow.events.get(event_id)
            if event is None:
                raise EntityNotFoundError("event", event_id)
            assignments = uow.assignments.list_for_event(event_id)

        counts = Counter(a.status for a in assignments)
        team_size = counts[AssignmentStatus.VALIDATED] + counts[AssignmentStatus.COMPLETED]
        return TeamSummaryResponse(
            event_id=event_id,
            counts={status: counts.get(status, 0) for status in AssignmentStatus},
            team_finalized=team_size > 0,
            team_size=team_size,
        )

    def _log_transition(
        self, assignment: Assignment, old_status: AssignmentStatus, actor: Actor
    ) -> None:
        self._logger.info(
            "assignment_transitioned",
            assignment_id=str(assignment.id),
            event_id=str(assignment.event_id),
            worker_id=str(assignment.worker_id),
            from_status=old_status.value,
            to_status=assignment.status.value,
            actor_role=actor.role.value,
        )
