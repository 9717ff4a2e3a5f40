"""
Role-Based Access Control

Roles arrive as verified claims with every call; this module only decides
what a role may do. The scheduling authority (regisseur, admin) manages
events, schedules and teams. Intermittents answer their own assignments.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from regie.core.observability import get_logger
from regie.domain.shared.exceptions import PermissionDeniedError

logger = get_logger(__name__)


class Role(str, Enum):
    """Roles known to the staffing engine."""

    ADMIN = "admin"
    REGISSEUR = "regisseur"
    INTERMITTENT = "intermittent"


class Permission(str, Enum):
    """Granular permissions for staffing operations."""

    EVENT_READ = "event:read"
    EVENT_MANAGE = "event:manage"
    SCHEDULE_READ = "schedule:read"
    SCHEDULE_MANAGE = "schedule:manage"
    ASSIGNMENT_READ = "assignment:read"
    ASSIGNMENT_MANAGE = "assignment:manage"
    ASSIGNMENT_RESPOND = "assignment:respond"
    TEAM_FINALIZE = "team:finalize"


_READ_PERMISSIONS = {
    Permission.EVENT_READ,
    Permission.SCHEDULE_READ,
    Permission.ASSIGNMENT_READ,
}

_AUTHORITY_PERMISSIONS = _READ_PERMISSIONS | {
    Permission.EVENT_MANAGE,
    Permission.SCHEDULE_MANAGE,
    Permission.ASSIGNMENT_MANAGE,
    Permission.TEAM_FINALIZE,
}

ROLE_PERMISSIONS: dict[Role, set[Permission]] = {
    Role.ADMIN: _AUTHORITY_PERMISSIONS,
    Role.REGISSEUR: _AUTHORITY_PERMISSIONS,
    Role.INTERMITTENT: _READ_PERMISSIONS | {Permission.ASSIGNMENT_RESPOND},
}

SCHEDULING_AUTHORITY_ROLES = frozenset({Role.ADMIN, Role.REGISSEUR})


class Actor(BaseModel):
    """The identity and role performing an operation."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    role: Role

    @property
    def is_scheduling_authority(self) -> bool:
        return self.role in SCHEDULING_AUTHORITY_ROLES

    def has_permission(self, permission: Permission) -> bool:
        return permission in ROLE_PERMISSIONS.get(self.role, set())


def require_permission(actor: Actor, permission: Permission, operation: str) -> None:
    """
    Ensure the actor's role grants a permission.

    Raises:
        PermissionDeniedError: If the role lacks the permission
    """
    if not actor.has_permission(permission):
        logger.warning(
            "permission_denied",
            user_id=str(actor.user_id),
            role=actor.role.value,
            permission=permission.value,
            operation=operation,
        )
        raise PermissionDeniedError(actor.role.value, operation)
