"""
Team Finalization

Partitions the assignments of an event into the validated team and the
workers not retained. The whole split is planned before any assignment is
touched so that a rejected selection changes nothing and a repeated
selection can be recognised as a no-op.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from ...shared.base import utcnow
from ...shared.exceptions import EmptySelectionError, InvalidCandidateError
from ..entities.assignment import Assignment
from ..entities.event import Event
from ..value_objects.enums import AssignmentStatus

SELECTABLE_STATUSES = frozenset(
    {
        AssignmentStatus.AVAILABLE,
        AssignmentStatus.UNCERTAIN,
        AssignmentStatus.NOT_RETAINED,
        AssignmentStatus.VALIDATED,
    }
)


@dataclass(frozen=True)
class FinalizationPlan:
    """The status changes a finalization would make, nothing applied yet."""

    event_id: UUID
    selected_ids: tuple[UUID, ...]
    to_validate: tuple[Assignment, ...] = field(default_factory=tuple)
    to_not_retain: tuple[Assignment, ...] = field(default_factory=tuple)
    already_validated: tuple[Assignment, ...] = field(default_factory=tuple)

    @property
    def is_noop(self) -> bool:
        return not self.to_validate and not self.to_not_retain

    @property
    def changed(self) -> tuple[Assignment, ...]:
        return self.to_validate + self.to_not_retain

    @property
    def validated_ids(self) -> list[UUID]:
        """Ids making up the team once the plan is applied."""
        return [a.id for a in self.already_validated + self.to_validate]

    @property
    def not_retained_ids(self) -> list[UUID]:
        return [a.id for a in self.to_not_retain]

    def summary(self) -> dict[str, list[str]]:
        return {
            "validated": [str(i) for i in self.validated_ids],
            "newly_validated": [str(a.id) for a in self.to_validate],
            "not_retained": [str(i) for i in self.not_retained_ids],
        }


def plan_finalization(
    event: Event,
    assignments: Iterable[Assignment],
    selected_ids: Sequence[UUID],
) -> FinalizationPlan:
    """
    Compute the team split for a selection.

    Args:
        event: Event whose team is finalized
        assignments: Every assignment of the event
        selected_ids: Assignment ids chosen for the team

    Raises:
        InvalidStateError: If the event is terminal
        EmptySelectionError: If nothing is selected
        InvalidCandidateError: If a selected id is foreign or not selectable
    """
    event.ensure_writable("finalize team")

    selected = list(dict.fromkeys(selected_ids))
    if not selected:
        raise EmptySelectionError(event.id)

    by_id = {a.id: a for a in assignments if a.event_id == event.id}
    invalid = [
        assignment_id
        for assignment_id in selected
        if assignment_id not in by_id
        or by_id[assignment_id].status not in SELECTABLE_STATUSES
    ]
    if invalid:
        raise InvalidCandidateError(invalid)

    selected_set = set(selected)
    to_validate = []
    already_validated = []
    to_not_retain = []
    for assignment in sorted(by_id.values(), key=lambda a: (a.created_at, str(a.id))):
        if assignment.status == AssignmentStatus.VALIDATED:
            # Validated members outside the selection stay on the team
            already_validated.append(assignment)
        elif assignment.id in selected_set:
            to_validate.append(assignment)
        elif assignment.status.is_in_play:
            to_not_retain.append(assignment)

    return FinalizationPlan(
        event_id=event.id,
        selected_ids=tuple(selected),
        to_validate=tuple(to_validate),
        to_not_retain=tuple(to_not_retain),
        already_validated=tuple(already_validated),
    )


def apply_finalization(
    plan: FinalizationPlan, actor_id: UUID, now: datetime | None = None
) -> list[Assignment]:
    """Apply a plan to its assignments and return the ones that changed."""
    now = now or utcnow()
    for assignment in plan.to_validate:
        assignment.mark_validated(actor_id, now)
    for assignment in plan.to_not_retain:
        assignment.mark_not_retained(actor_id, now)
    return list(plan.changed)
