"""
Domain Exceptions

Every rejected operation raises one of the errors below. Each carries a
machine-readable ``error_type`` plus a ``details`` mapping naming the
offending field, status or records, so callers can render a precise message
instead of a generic failure.
"""

from enum import Enum
from typing import Any
from uuid import UUID

Details = dict[str, Any]


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    PERMISSION_DENIED = "permission_denied"
    INVALID_TRANSITION = "invalid_transition"
    INVALID_STATE = "invalid_state"
    INVALID_RANGE = "invalid_range"
    OUT_OF_RANGE = "out_of_range"
    CONFLICTS_PENDING = "conflicts_pending"
    DUPLICATE_ASSIGNMENT = "duplicate_assignment"
    INVALID_CANDIDATE = "invalid_candidate"
    EMPTY_SELECTION = "empty_selection"
    NOT_FOUND = "not_found"
    CONCURRENT_MODIFICATION = "concurrent_modification"
    VALIDATION = "validation"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    retryable = False

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: Details | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when an input value is malformed."""

    def __init__(
        self,
        field_name: str,
        value: Any,
        message: str,
        details: Details | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value

        details = details or {}
        details.update(
            {
                "field": field_name,
                "value": str(value) if value is not None else None,
            }
        )
        super().__init__(
            f"Validation failed for field '{field_name}': {message}",
            ErrorType.VALIDATION,
            details,
        )


class PermissionDeniedError(DomainError):
    """Raised when the actor lacks the role required for an operation."""

    def __init__(self, actor_role: str, operation: str, reason: str = "") -> None:
        message = f"Role '{actor_role}' may not {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            ErrorType.PERMISSION_DENIED,
            {"role": actor_role, "operation": operation},
        )
        self.actor_role = actor_role
        self.operation = operation


class InvalidTransitionError(DomainError):
    """Raised when a status change is not a legal edge from the current state."""

    def __init__(
        self,
        entity_type: str,
        entity_id: UUID,
        current_status: str,
        attempted_status: str,
        reason: str = "",
    ) -> None:
        message = (
            f"Cannot change {entity_type} {entity_id} "
            f"from {current_status} to {attempted_status}"
        )
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            ErrorType.INVALID_TRANSITION,
            {
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "current_status": current_status,
                "attempted_status": attempted_status,
            },
        )
        self.current_status = current_status
        self.attempted_status = attempted_status


class InvalidStateError(DomainError):
    """Raised when an operation is not allowed in the entity's current state."""

    def __init__(
        self, entity_type: str, entity_id: UUID, status: str, operation: str
    ) -> None:
        super().__init__(
            f"Cannot {operation} {entity_type} {entity_id} while {status}",
            ErrorType.INVALID_STATE,
            {
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "status": status,
                "operation": operation,
            },
        )
        self.status = status
        self.operation = operation


class InvalidRangeError(DomainError):
    """Raised when a time or date window is malformed (end <= start)."""

    def __init__(self, start: Any, end: Any, field_name: str = "time_range") -> None:
        super().__init__(
            f"Invalid {field_name}: end ({end}) must be after start ({start})",
            ErrorType.INVALID_RANGE,
            {"field": field_name, "start": str(start), "end": str(end)},
        )
        self.start = start
        self.end = end


class OutOfRangeError(DomainError):
    """Raised when a schedule date falls outside its parent event's window."""

    def __init__(self, value: Any, window_start: Any, window_end: Any) -> None:
        super().__init__(
            f"{value} is outside the event window {window_start} - {window_end}",
            ErrorType.OUT_OF_RANGE,
            {
                "value": str(value),
                "window_start": str(window_start),
                "window_end": str(window_end),
            },
        )
        self.value = value


class ConflictsPendingError(DomainError):
    """Raised when a schedule write overlaps unacknowledged schedules."""

    def __init__(self, conflicts: list[Any]) -> None:
        super().__init__(
            f"{len(conflicts)} overlapping schedule(s) must be acknowledged",
            ErrorType.CONFLICTS_PENDING,
            {
                "conflicts": [
                    {
                        "id": str(c.id),
                        "title": c.title,
                        "schedule_date": c.schedule_date.isoformat(),
                        "start_time": c.start_time.strftime("%H:%M"),
                        "end_time": c.end_time.strftime("%H:%M"),
                    }
                    for c in conflicts
                ]
            },
        )
        self.conflicts = conflicts


class DuplicateAssignmentError(DomainError):
    """Raised when an assignment already exists for an (event, worker) pair."""

    def __init__(self, event_id: UUID, worker_id: UUID) -> None:
        super().__init__(
            f"Worker {worker_id} is already assigned to event {event_id}",
            ErrorType.DUPLICATE_ASSIGNMENT,
            {"event_id": str(event_id), "worker_id": str(worker_id)},
        )
        self.event_id = event_id
        self.worker_id = worker_id


class InvalidCandidateError(DomainError):
    """Raised when selected assignments are not eligible for team finalization."""

    def __init__(self, assignment_ids: list[UUID]) -> None:
        super().__init__(
            f"{len(assignment_ids)} selected assignment(s) cannot join the team",
            ErrorType.INVALID_CANDIDATE,
            {"assignment_ids": [str(i) for i in assignment_ids]},
        )
        self.assignment_ids = assignment_ids


class EmptySelectionError(DomainError):
    """Raised when team finalization is called without selected assignments."""

    def __init__(self, event_id: UUID) -> None:
        super().__init__(
            f"At least one assignment must be selected for event {event_id}",
            ErrorType.EMPTY_SELECTION,
            {"event_id": str(event_id)},
        )


class EntityNotFoundError(DomainError):
    """Raised when a referenced event, schedule or assignment does not exist."""

    def __init__(self, entity_type: str, entity_id: UUID) -> None:
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            ErrorType.NOT_FOUND,
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConcurrentModificationError(DomainError):
    """Raised when an optimistic version check fails."""

    retryable = True

    def __init__(self, entity_type: str, entity_id: UUID) -> None:
        super().__init__(
            f"Concurrent modification of {entity_type}: {entity_id}",
            ErrorType.CONCURRENT_MODIFICATION,
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id
