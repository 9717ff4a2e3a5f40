"""
Unit tests for the Assignment status machine.
"""

from datetime import datetime
from uuid import uuid4

import pytest

from regie.core.rbac import Actor, Role
from regie.domain.shared.exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    PermissionDeniedError,
    ValidationError,
)
from regie.domain.staffing.entities.assignment import Assignment
from regie.domain.staffing.events import AssignmentStatusChanged
from regie.domain.staffing.value_objects.enums import AssignmentStatus, EventStatus

NOW = datetime(2025, 5, 10, 14, 0)
PUBLISHED = EventStatus.PUBLISHED
REGISSEUR = Actor(user_id=uuid4(), role=Role.REGISSEUR)


@pytest.fixture
def worker() -> Actor:
    return Actor(user_id=uuid4(), role=Role.INTERMITTENT)


@pytest.fixture
def assignment(worker) -> Assignment:
    return Assignment.create(uuid4(), worker.user_id, AssignmentStatus.INVITED, now=NOW)


class TestAssignmentCreation:
    @pytest.mark.parametrize("status", [AssignmentStatus.INVITED, AssignmentStatus.PROPOSED])
    def test_starts_pending(self, worker, status):
        assignment = Assignment.create(uuid4(), worker.user_id, status)

        assert assignment.status == status
        assert assignment.pending_status == status
        assert assignment.responded_at is None
        assert assignment.is_valid()

    @pytest.mark.parametrize(
        "status", [AssignmentStatus.AVAILABLE, AssignmentStatus.VALIDATED]
    )
    def test_cannot_start_past_pending(self, worker, status):
        with pytest.raises(ValidationError):
            Assignment.create(uuid4(), worker.user_id, status)


class TestWorkerResponses:
    def test_respond_sets_status_and_response_time(self, assignment, worker):
        old = assignment.respond(worker, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)

        assert old == AssignmentStatus.INVITED
        assert assignment.status == AssignmentStatus.AVAILABLE
        assert assignment.responded_at == NOW
        [domain_event] = assignment.get_domain_events()
        assert isinstance(domain_event, AssignmentStatusChanged)
        assert domain_event.aggregate_id == assignment.event_id
        assert domain_event.actor_id == worker.user_id

    def test_changing_answer_keeps_first_response_time(self, assignment, worker):
        later = datetime(2025, 5, 11)
        assignment.respond(worker, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)
        assignment.respond(worker, AssignmentStatus.UNCERTAIN, PUBLISHED, later)

        assert assignment.status == AssignmentStatus.UNCERTAIN
        assert assignment.responded_at == NOW

    def test_other_worker_cannot_respond(self, assignment):
        stranger = Actor(user_id=uuid4(), role=Role.INTERMITTENT)

        with pytest.raises(PermissionDeniedError):
            assignment.respond(stranger, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)
        assert assignment.status == AssignmentStatus.INVITED

    def test_regisseur_cannot_respond_for_worker(self, assignment):
        with pytest.raises(PermissionDeniedError):
            assignment.respond(REGISSEUR, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)

    @pytest.mark.parametrize(
        "target",
        [
            AssignmentStatus.VALIDATED,
            AssignmentStatus.NOT_RETAINED,
            AssignmentStatus.COMPLETED,
            AssignmentStatus.INVITED,
            AssignmentStatus.DECLINED,
        ],
    )
    @pytest.mark.parametrize("as_worker", [True, False])
    def test_non_response_targets_are_invalid_whoever_asks(
        self, assignment, worker, target, as_worker
    ):
        actor = worker if as_worker else REGISSEUR

        with pytest.raises(InvalidTransitionError):
            assignment.respond(actor, target, PUBLISHED, NOW)

    @pytest.mark.parametrize("event_status", [EventStatus.DRAFT, EventStatus.CANCELLED])
    def test_event_must_be_published(self, assignment, worker, event_status):
        with pytest.raises(InvalidStateError):
            assignment.respond(worker, AssignmentStatus.AVAILABLE, event_status, NOW)

    def test_unavailable_is_final_for_the_worker(self, assignment, worker):
        assignment.respond(worker, AssignmentStatus.UNAVAILABLE, PUBLISHED, NOW)

        with pytest.raises(InvalidTransitionError):
            assignment.respond(worker, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)

    def test_decline_after_validation(self, assignment, worker):
        assignment.respond(worker, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)
        assignment.mark_validated(REGISSEUR.user_id, NOW)

        assignment.decline(worker, PUBLISHED, NOW)

        assert assignment.status == AssignmentStatus.DECLINED

    def test_declined_is_final(self, assignment, worker):
        assignment.decline(worker, PUBLISHED, NOW)

        with pytest.raises(InvalidTransitionError):
            assignment.decline(worker, PUBLISHED, NOW)


class TestRevoke:
    def test_revoke_returns_to_pending_status(self, assignment, worker):
        assignment.respond(worker, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)

        assert assignment.revoke(REGISSEUR, NOW) is True
        assert assignment.status == AssignmentStatus.INVITED
        assert assignment.responded_at is None

    def test_revoke_pending_changes_nothing(self, assignment):
        assert assignment.revoke(REGISSEUR, NOW) is False
        assert assignment.get_domain_events() == []

    def test_revoke_completed_fails(self, assignment, worker):
        assignment.respond(worker, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)
        assignment.mark_validated(REGISSEUR.user_id, NOW)
        assignment.mark_completed(REGISSEUR.user_id, NOW)

        with pytest.raises(InvalidTransitionError):
            assignment.revoke(REGISSEUR, NOW)

    def test_worker_cannot_revoke(self, assignment, worker):
        with pytest.raises(PermissionDeniedError):
            assignment.revoke(worker, NOW)


class TestSystemTransitions:
    def test_only_validated_assignments_complete(self, assignment):
        with pytest.raises(InvalidTransitionError):
            assignment.mark_completed(REGISSEUR.user_id, NOW)

    def test_declined_assignment_cannot_be_validated(self, assignment, worker):
        assignment.decline(worker, PUBLISHED, NOW)

        with pytest.raises(InvalidTransitionError):
            assignment.mark_validated(REGISSEUR.user_id, NOW)

    def test_not_retained_can_be_validated_again(self, assignment, worker):
        assignment.respond(worker, AssignmentStatus.AVAILABLE, PUBLISHED, NOW)
        assignment.mark_not_retained(REGISSEUR.user_id, NOW)

        assignment.mark_validated(REGISSEUR.user_id, NOW)

        assert assignment.status == AssignmentStatus.VALIDATED
