"""Data Transfer Objects for the application layer."""

from .assignment_dtos import (
    AssignmentResponse,
    CreateAssignmentRequest,
    FinalizationResponse,
    FinalizeTeamRequest,
    RespondAssignmentRequest,
    TeamSummaryResponse,
)
from .event_dtos import (
    CreateEventRequest,
    EventResponse,
    HistoryEntryResponse,
    TransitionEventRequest,
    UpdateEventRequest,
)
from .schedule_dtos import (
    ConflictCheckRequest,
    CreateScheduleRequest,
    DuplicateScheduleRequest,
    ReorderSchedulesRequest,
    ScheduleDayResponse,
    ScheduleResponse,
    ScheduleWriteResponse,
    UpdateScheduleRequest,
)

__all__ = [
    "AssignmentResponse",
    "ConflictCheckRequest",
    "CreateAssignmentRequest",
    "CreateEventRequest",
    "CreateScheduleRequest",
    "DuplicateScheduleRequest",
    "EventResponse",
    "FinalizationResponse",
    "FinalizeTeamRequest",
    "HistoryEntryResponse",
    "ReorderSchedulesRequest",
    "RespondAssignmentRequest",
    "ScheduleDayResponse",
    "ScheduleResponse",
    "ScheduleWriteResponse",
    "TeamSummaryResponse",
    "TransitionEventRequest",
    "UpdateEventRequest",
]
