"""Application services: the library entry points of the staffing engine."""

from .assignment_service import AssignmentService
from .base_service import ApplicationServiceBase
from .event_service import EventService
from .schedule_service import ScheduleService

__all__ = [
    "ApplicationServiceBase",
    "AssignmentService",
    "EventService",
    "ScheduleService",
]
