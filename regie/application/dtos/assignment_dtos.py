"""Assignment and team Data Transfer Objects."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from regie.domain.staffing.entities.assignment import Assignment
from regie.domain.staffing.value_objects.enums import AssignmentStatus


class CreateAssignmentRequest(BaseModel):
    worker_id: UUID
    role_label: str | None = Field(None, max_length=100)
    notes: str | None = Field(None, max_length=2000)
    status: Literal["proposed", "invited"] = "proposed"


class RespondAssignmentRequest(BaseModel):
    """The worker's answer; validated, not_retained and completed are refused."""

    response: AssignmentStatus


class FinalizeTeamRequest(BaseModel):
    selected_ids: list[UUID]


class AssignmentResponse(BaseModel):
    id: UUID
    event_id: UUID
    worker_id: UUID
    status: AssignmentStatus
    pending_status: AssignmentStatus
    responded_at: datetime | None
    role_label: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime | None
    version: int

    @classmethod
    def from_entity(cls, assignment: Assignment) -> "AssignmentResponse":
        return cls(
            id=assignment.id,
            event_id=assignment.event_id,
            worker_id=assignment.worker_id,
            status=assignment.status,
            pending_status=assignment.pending_status,
            responded_at=assignment.responded_at,
            role_label=assignment.role_label,
            notes=assignment.notes,
            created_at=assignment.created_at,
            updated_at=assignment.updated_at,
            version=assignment.version,
        )


class FinalizationResponse(BaseModel):
    """Outcome of a team finalization."""

    event_id: UUID
    changed: bool
    validated_ids: list[UUID]
    not_retained_ids: list[UUID]


class TeamSummaryResponse(BaseModel):
    event_id: UUID
    counts: dict[AssignmentStatus, int]
    team_finalized: bool
    team_size: int
