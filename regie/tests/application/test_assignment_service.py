"""
Assignment service tests: the worker workflow, revocation, team
finalization and the team summary.
"""

from uuid import uuid4

import pytest

from regie.domain.shared.exceptions import (
    DuplicateAssignmentError,
    EmptySelectionError,
    EntityNotFoundError,
    InvalidCandidateError,
    InvalidStateError,
    InvalidTransitionError,
    PermissionDeniedError,
    ValidationError,
)
from regie.domain.staffing.events import AssignmentStatusChanged, TeamFinalized
from regie.domain.staffing.value_objects.enums import AssignmentStatus
from regie.tests.conftest import new_worker

AVAILABLE = AssignmentStatus.AVAILABLE


class TestCreateAssignment:
    def test_create_invitation(self, assignment_service, regisseur, worker, published_event):
        assignment = assignment_service.create_assignment(
            regisseur,
            published_event.id,
            worker.user_id,
            role_label="Régisseur son",
            status=AssignmentStatus.INVITED,
        )

        assert assignment.status == AssignmentStatus.INVITED
        assert assignment.pending_status == AssignmentStatus.INVITED
        assert assignment.role_label == "Régisseur son"

    def test_duplicate_worker_fails(
        self, assignment_service, regisseur, worker, published_event
    ):
        assignment_service.create_assignment(regisseur, published_event.id, worker.user_id)

        with pytest.raises(DuplicateAssignmentError):
            assignment_service.create_assignment(
                regisseur, published_event.id, worker.user_id
            )

    def test_initial_status_must_be_pending(
        self, assignment_service, regisseur, worker, published_event
    ):
        with pytest.raises(ValidationError):
            assignment_service.create_assignment(
                regisseur, published_event.id, worker.user_id, status=AVAILABLE
            )

    def test_unknown_event(self, assignment_service, regisseur, worker):
        with pytest.raises(EntityNotFoundError):
            assignment_service.create_assignment(regisseur, uuid4(), worker.user_id)

    def test_worker_cannot_propose(self, assignment_service, worker, published_event):
        with pytest.raises(PermissionDeniedError):
            assignment_service.create_assignment(
                worker, published_event.id, worker.user_id
            )


class TestWorkerWorkflow:
    def test_worker_responds(
        self, assignment_service, event_bus, worker, published_event, respond_as
    ):
        assignment = respond_as(published_event.id, worker, AssignmentStatus.UNCERTAIN)

        assert assignment.status == AssignmentStatus.UNCERTAIN
        assert assignment.responded_at is not None
        [changed] = event_bus.get_event_history(AssignmentStatusChanged)
        assert changed.new_status == AssignmentStatus.UNCERTAIN

    def test_other_worker_cannot_respond(
        self, assignment_service, regisseur, worker, other_worker, published_event
    ):
        assignment = assignment_service.create_assignment(
            regisseur, published_event.id, worker.user_id
        )

        with pytest.raises(PermissionDeniedError):
            assignment_service.respond_to_assignment(other_worker, assignment.id, AVAILABLE)
        stored = assignment_service.get_assignment(regisseur, assignment.id)
        assert stored.status == AssignmentStatus.PROPOSED

    def test_worker_cannot_validate_themselves(
        self, assignment_service, regisseur, worker, published_event
    ):
        assignment = assignment_service.create_assignment(
            regisseur, published_event.id, worker.user_id
        )

        with pytest.raises(InvalidTransitionError):
            assignment_service.respond_to_assignment(
                worker, assignment.id, AssignmentStatus.VALIDATED
            )

    def test_draft_event_blocks_responses(
        self, assignment_service, regisseur, worker, draft_event
    ):
        assignment = assignment_service.create_assignment(
            regisseur, draft_event.id, worker.user_id
        )

        with pytest.raises(InvalidStateError):
            assignment_service.respond_to_assignment(worker, assignment.id, AVAILABLE)

    def test_decline(self, assignment_service, worker, published_event, respond_as):
        assignment = respond_as(published_event.id, worker, AVAILABLE)

        declined = assignment_service.decline_assignment(worker, assignment.id)

        assert declined.status == AssignmentStatus.DECLINED

    def test_revoke_reopens_assignment(
        self, assignment_service, event_service, regisseur, worker, published_event, respond_as
    ):
        assignment = respond_as(published_event.id, worker, AVAILABLE)

        revoked = assignment_service.revoke_assignment(regisseur, assignment.id)

        assert revoked.status == AssignmentStatus.PROPOSED
        assert revoked.responded_at is None
        entry = event_service.get_history(regisseur, published_event.id)[-1]
        assert entry.action == "assignment_revoked"
        assert entry.details["from"] == "available"

    def test_revoke_pending_is_a_noop(
        self, assignment_service, event_service, regisseur, worker, published_event
    ):
        assignment = assignment_service.create_assignment(
            regisseur, published_event.id, worker.user_id
        )
        before = event_service.get_history(regisseur, published_event.id)

        revoked = assignment_service.revoke_assignment(regisseur, assignment.id)

        assert revoked.version == assignment.version
        assert event_service.get_history(regisseur, published_event.id) == before


class TestAssignmentReads:
    def test_workers_only_see_their_own(
        self, assignment_service, regisseur, worker, other_worker, published_event
    ):
        mine = assignment_service.create_assignment(
            regisseur, published_event.id, worker.user_id
        )
        theirs = assignment_service.create_assignment(
            regisseur, published_event.id, other_worker.user_id
        )

        listed = assignment_service.list_assignments(worker, published_event.id)
        all_listed = assignment_service.list_assignments(regisseur, published_event.id)

        assert [a.id for a in listed] == [mine.id]
        assert [a.id for a in all_listed] == [mine.id, theirs.id]
        with pytest.raises(PermissionDeniedError):
            assignment_service.get_assignment(worker, theirs.id)

    def test_worker_assignments_across_events(
        self, assignment_service, regisseur, worker, published_event
    ):
        assignment_service.create_assignment(regisseur, published_event.id, worker.user_id)

        [mine] = assignment_service.list_worker_assignments(worker)

        assert mine.event_id == published_event.id


class TestFinalizeTeam:
    @pytest.fixture
    def candidates(self, published_event, respond_as):
        """Three available workers and one unavailable, in creation order."""
        statuses = [AVAILABLE, AVAILABLE, AVAILABLE, AssignmentStatus.UNAVAILABLE]
        return [
            respond_as(published_event.id, new_worker(), status) for status in statuses
        ]

    def test_finalize_partitions_the_team(
        self, assignment_service, event_bus, regisseur, published_event, candidates
    ):
        w1, w2, w3, w4 = candidates

        result = assignment_service.finalize_team(
            regisseur, published_event.id, [w1.id, w2.id]
        )

        assert result.changed
        assert result.validated_ids == [w1.id, w2.id]
        assert result.not_retained_ids == [w3.id]
        statuses = {
            a.id: a.status
            for a in assignment_service.list_assignments(regisseur, published_event.id)
        }
        assert statuses == {
            w1.id: AssignmentStatus.VALIDATED,
            w2.id: AssignmentStatus.VALIDATED,
            w3.id: AssignmentStatus.NOT_RETAINED,
            w4.id: AssignmentStatus.UNAVAILABLE,
        }
        [finalized] = event_bus.get_event_history(TeamFinalized)
        assert finalized.validated_ids == [w1.id, w2.id]

    def test_empty_selection_fails(
        self, assignment_service, regisseur, published_event, candidates
    ):
        with pytest.raises(EmptySelectionError):
            assignment_service.finalize_team(regisseur, published_event.id, [])

    def test_invalid_candidate_changes_nothing(
        self, assignment_service, regisseur, published_event, candidates
    ):
        w1, _, _, w4 = candidates

        with pytest.raises(InvalidCandidateError):
            assignment_service.finalize_team(regisseur, published_event.id, [w1.id, w4.id])

        assert assignment_service.get_assignment(regisseur, w1.id).status == AVAILABLE

    def test_repeated_finalization_is_a_noop(
        self, assignment_service, event_service, regisseur, published_event, candidates
    ):
        selected = [candidates[0].id, candidates[1].id]
        assignment_service.finalize_team(regisseur, published_event.id, selected)
        history_before = event_service.get_history(regisseur, published_event.id)

        again = assignment_service.finalize_team(regisseur, published_event.id, selected)

        assert not again.changed
        assert again.validated_ids == selected
        assert event_service.get_history(regisseur, published_event.id) == history_before

    def test_team_summary(self, assignment_service, regisseur, published_event, candidates):
        assignment_service.finalize_team(regisseur, published_event.id, [candidates[0].id])

        summary = assignment_service.team_summary(regisseur, published_event.id)

        assert summary.team_finalized
        assert summary.team_size == 1
        assert summary.counts[AssignmentStatus.NOT_RETAINED] == 2
        assert summary.counts[AssignmentStatus.UNAVAILABLE] == 1
        assert summary.counts[AssignmentStatus.INVITED] == 0

    def test_worker_cannot_finalize(self, assignment_service, worker, published_event):
        with pytest.raises(PermissionDeniedError):
            assignment_service.finalize_team(worker, published_event.id, [uuid4()])
