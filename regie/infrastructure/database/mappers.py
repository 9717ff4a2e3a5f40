"""
Mappers for converting between domain entities and SQL entities.

Value objects and enums are translated here so the domain layer never sees
SQLModel instances and the tables never hold domain behaviour.
"""

from typing import Any

from regie.domain.staffing.entities.assignment import Assignment as DomainAssignment
from regie.domain.staffing.entities.daily_schedule import (
    DailySchedule as DomainDailySchedule,
)
from regie.domain.staffing.entities.event import Event as DomainEvent
from regie.domain.staffing.entities.event import HistoryEntry
from regie.domain.staffing.value_objects.enums import TargetAudience

from .models import Assignment as SQLAssignment
from .models import DailySchedule as SQLDailySchedule
from .models import Event as SQLEvent
from .models import EventHistory as SQLEventHistory


class EventMapper:
    @staticmethod
    def domain_to_sql(event: DomainEvent) -> SQLEvent:
        return SQLEvent(**EventMapper.columns(event), id=event.id, version=event.version)

    @staticmethod
    def columns(event: DomainEvent) -> dict[str, Any]:
        """Column values written on insert and on every versioned update."""
        return {
            "title": event.title,
            "description": event.description,
            "location": event.location,
            "start_at": event.start_at,
            "end_at": event.end_at,
            "target_audience": event.target_audience,
            "status": event.status,
            "published_at": event.published_at,
            "created_by": event.created_by,
            "created_at": event.created_at,
            "updated_at": event.updated_at,
        }

    @staticmethod
    def sql_to_domain(row: SQLEvent) -> DomainEvent:
        return DomainEvent(
            id=row.id,
            title=row.title,
            description=row.description,
            location=row.location,
            start_at=row.start_at,
            end_at=row.end_at,
            target_audience=TargetAudience(row.target_audience),
            status=row.status,
            published_at=row.published_at,
            created_by=row.created_by,
            created_at=row.created_at,
            updated_at=row.updated_at,
            version=row.version,
        )


class DailyScheduleMapper:
    @staticmethod
    def domain_to_sql(schedule: DomainDailySchedule) -> SQLDailySchedule:
        return SQLDailySchedule(
            **DailyScheduleMapper.columns(schedule),
            id=schedule.id,
            version=schedule.version,
        )

    @staticmethod
    def columns(schedule: DomainDailySchedule) -> dict[str, Any]:
        return {
            "event_id": schedule.event_id,
            "schedule_date": schedule.schedule_date,
            "start_time": schedule.start_time,
            "end_time": schedule.end_time,
            "title": schedule.title,
            "description": schedule.description,
            "location": schedule.location,
            # JSON column, stored as plain strings
            "target_audience": [a.value for a in schedule.target_audience],
            "is_mandatory": schedule.is_mandatory,
            "max_participants": schedule.max_participants,
            "required_skills": list(schedule.required_skills),
            "responsible_person": schedule.responsible_person,
            "position": schedule.position,
            "created_by": schedule.created_by,
            "created_at": schedule.created_at,
            "updated_at": schedule.updated_at,
        }

    @staticmethod
    def sql_to_domain(row: SQLDailySchedule) -> DomainDailySchedule:
        return DomainDailySchedule(
            id=row.id,
            event_id=row.event_id,
            schedule_date=row.schedule_date,
            start_time=row.start_time,
            end_time=row.end_time,
            title=row.title,
            description=row.description,
            location=row.location,
            target_audience=[TargetAudience(a) for a in row.target_audience or []],
            is_mandatory=row.is_mandatory,
            max_participants=row.max_participants,
            required_skills=list(row.required_skills or []),
            responsible_person=row.responsible_person,
            position=row.position,
            created_by=row.created_by,
            created_at=row.created_at,
            updated_at=row.updated_at,
            version=row.version,
        )


class AssignmentMapper:
    @staticmethod
    def domain_to_sql(assignment: DomainAssignment) -> SQLAssignment:
        return SQLAssignment(
            **AssignmentMapper.columns(assignment),
            id=assignment.id,
            version=assignment.version,
        )

    @staticmethod
    def columns(assignment: DomainAssignment) -> dict[str, Any]:
        return {
            "event_id": assignment.event_id,
            "worker_id": assignment.worker_id,
            "status": assignment.status,
            "pending_status": assignment.pending_status,
            "responded_at": assignment.responded_at,
            "role_label": assignment.role_label,
            "notes": assignment.notes,
            "created_at": assignment.created_at,
            "updated_at": assignment.updated_at,
        }

    @staticmethod
    def sql_to_domain(row: SQLAssignment) -> DomainAssignment:
        return DomainAssignment(
            id=row.id,
            event_id=row.event_id,
            worker_id=row.worker_id,
            status=row.status,
            pending_status=row.pending_status,
            responded_at=row.responded_at,
            role_label=row.role_label,
            notes=row.notes,
            created_at=row.created_at,
            updated_at=row.updated_at,
            version=row.version,
        )


class HistoryMapper:
    @staticmethod
    def domain_to_sql(entry: HistoryEntry) -> SQLEventHistory:
        return SQLEventHistory(
            id=entry.id,
            event_id=entry.event_id,
            action=entry.action,
            actor_id=entry.actor_id,
            actor_role=entry.actor_role,
            timestamp=entry.timestamp,
            details=entry.details,
        )

    @staticmethod
    def sql_to_domain(row: SQLEventHistory) -> HistoryEntry:
        return HistoryEntry(
            id=row.id,
            event_id=row.event_id,
            action=row.action,
            actor_id=row.actor_id,
            actor_role=row.actor_role,
            timestamp=row.timestamp,
            details=dict(row.details or {}),
        )
