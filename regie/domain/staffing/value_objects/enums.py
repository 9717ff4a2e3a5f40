"""Domain enums for event staffing."""

from enum import Enum


class EventStatus(str, Enum):
    """Event lifecycle status."""

    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        """Check if event status is terminal (cannot transition further)."""
        return self in {EventStatus.COMPLETED, EventStatus.CANCELLED}

    @property
    def is_visible_to_workers(self) -> bool:
        return self != EventStatus.DRAFT

    def can_transition_to(self, target_status: "EventStatus") -> bool:
        """Check if event can transition from current status to target status."""
        valid_transitions = {
            EventStatus.DRAFT: {EventStatus.PUBLISHED},
            EventStatus.PUBLISHED: {
                EventStatus.DRAFT,  # Unpublish for revisions
                EventStatus.CANCELLED,
                EventStatus.COMPLETED,
            },
            EventStatus.CANCELLED: set(),  # Terminal state
            EventStatus.COMPLETED: set(),  # Terminal state
        }
        return target_status in valid_transitions.get(self, set())


class AssignmentStatus(str, Enum):
    """Assignment status, ordered by position in the staffing workflow."""

    INVITED = "invited"  # Worker invited, awaiting response
    PROPOSED = "proposed"  # Worker proposed by the regisseur, awaiting response
    AVAILABLE = "available"
    UNCERTAIN = "uncertain"
    UNAVAILABLE = "unavailable"
    VALIDATED = "validated"  # Selected for the team
    NOT_RETAINED = "not_retained"  # Passed over at team finalization
    DECLINED = "declined"  # Worker withdrew
    COMPLETED = "completed"  # Worked the event

    @property
    def is_pending(self) -> bool:
        """Check if the worker has not responded yet."""
        return self in {AssignmentStatus.INVITED, AssignmentStatus.PROPOSED}

    @property
    def is_candidate(self) -> bool:
        """Check if the worker can be picked for the team."""
        return self in {AssignmentStatus.AVAILABLE, AssignmentStatus.UNCERTAIN}

    @property
    def is_in_play(self) -> bool:
        """Check if the assignment still awaits a team decision."""
        return self.is_pending or self.is_candidate

    @property
    def is_finalization_outcome(self) -> bool:
        return self in {AssignmentStatus.VALIDATED, AssignmentStatus.NOT_RETAINED}

    @property
    def is_terminal(self) -> bool:
        return self == AssignmentStatus.COMPLETED

    def can_worker_transition_to(self, target_status: "AssignmentStatus") -> bool:
        """Check if the assigned worker may move the assignment to target status."""
        pending_targets = set(WORKER_RESPONSES) | {AssignmentStatus.DECLINED}
        valid_transitions = {
            AssignmentStatus.INVITED: pending_targets,
            AssignmentStatus.PROPOSED: pending_targets,
            AssignmentStatus.AVAILABLE: {
                AssignmentStatus.UNCERTAIN,
                AssignmentStatus.UNAVAILABLE,
                AssignmentStatus.DECLINED,
            },
            AssignmentStatus.UNCERTAIN: {
                AssignmentStatus.AVAILABLE,
                AssignmentStatus.UNAVAILABLE,
                AssignmentStatus.DECLINED,
            },
            AssignmentStatus.UNAVAILABLE: set(),  # Terminal for the worker
            AssignmentStatus.VALIDATED: {AssignmentStatus.DECLINED},
            AssignmentStatus.NOT_RETAINED: set(),
            AssignmentStatus.DECLINED: set(),
            AssignmentStatus.COMPLETED: set(),
        }
        return target_status in valid_transitions.get(self, set())


WORKER_RESPONSES = (
    AssignmentStatus.AVAILABLE,
    AssignmentStatus.UNCERTAIN,
    AssignmentStatus.UNAVAILABLE,
)


class TargetAudience(str, Enum):
    """Worker category a schedule or event is relevant to."""

    ARTISTES = "artistes"
    TECHNIQUES = "techniques"
    BOTH = "both"


class HistoryAction(str, Enum):
    """Kinds of entries in an event's audit history."""

    CREATE = "create"
    UPDATE = "update"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    CANCEL = "cancel"
    COMPLETE = "complete"
    DELETE = "delete"
    SCHEDULE_CREATE = "schedule_create"
    SCHEDULE_UPDATE = "schedule_update"
    SCHEDULE_DELETE = "schedule_delete"
    SCHEDULE_REORDER = "schedule_reorder"
    TEAM_FINALIZED = "team_finalized"
    ASSIGNMENT_REVOKED = "assignment_revoked"

    @classmethod
    def for_status(cls, old: EventStatus, new: EventStatus) -> "HistoryAction":
        """History action recorded for an event status change."""
        if new == EventStatus.PUBLISHED:
            return cls.PUBLISH
        if new == EventStatus.DRAFT and old == EventStatus.PUBLISHED:
            return cls.UNPUBLISH
        if new == EventStatus.CANCELLED:
            return cls.CANCEL
        return cls.COMPLETE
