"""
Base application service providing common functionality.

Every service runs each use case in its own unit of work and takes the
current time from an injectable clock.
"""

from abc import ABC
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from regie.core.observability import get_logger
from regie.core.rbac import Actor
from regie.domain.shared.base import utcnow
from regie.domain.shared.exceptions import EntityNotFoundError, ValidationError
from regie.domain.staffing.entities.event import Event
from regie.infrastructure.database.unit_of_work import UnitOfWorkInterface

ModelT = TypeVar("ModelT", bound=BaseModel)

Clock = Callable[[], datetime]


class ApplicationServiceBase(ABC):
    """
    Base class for application services.

    Provides common functionality for validation, error handling,
    and transaction coordination across all application services.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], UnitOfWorkInterface],
        clock: Clock | None = None,
    ):
        """
        Initialize the application service.

        Args:
            unit_of_work_factory: Factory for creating unit of work instances
            clock: Returns the current naive-UTC time; defaults to the system clock
        """
        self._uow_factory = unit_of_work_factory
        self._clock = clock or utcnow
        self._logger = get_logger(type(self).__module__)

    def now(self) -> datetime:
        return self._clock()

    @contextmanager
    def validating(self) -> Iterator[None]:
        """
        Report pydantic validation failures of domain models as ValidationError.

        Raises:
            ValidationError: Naming the first offending field
        """
        try:
            yield
        except PydanticValidationError as e:
            first = e.errors()[0]
            field_name = ".".join(str(part) for part in first.get("loc", ())) or e.title
            raise ValidationError(
                field_name, first.get("input"), first.get("msg", "invalid")
            ) from e

    def build(self, model: type[ModelT], data: dict[str, Any]) -> ModelT:
        """Validate raw data into a domain model."""
        with self.validating():
            return model.model_validate(data)

    @staticmethod
    def load_visible_event(uow: UnitOfWorkInterface, actor: Actor, event_id: UUID) -> Event:
        """
        Load an event the actor is allowed to see.

        Drafts are hidden from workers and reported as missing.

        Raises:
            EntityNotFoundError: If the event does not exist or is hidden
        """
        event = uow.events.get_required(event_id)
        if not actor.is_scheduling_authority and not event.status.is_visible_to_workers:
            raise EntityNotFoundError("event", event_id)
        return event
