"""
Shared fixtures for the staffing engine tests.

Each test gets its own SQLite file database, a fresh in-memory event bus and
services driven by a clock that advances one second per reading, so history
and assignment ordering is deterministic.
"""

from collections.abc import Iterator
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from regie.api.main import create_app
from regie.application.services import AssignmentService, EventService, ScheduleService
from regie.core.db import build_engine, create_db_and_tables, session_factory
from regie.core.rbac import Actor, Role
from regie.domain.staffing.value_objects.enums import AssignmentStatus
from regie.infrastructure.database.unit_of_work import UnitOfWorkManager
from regie.infrastructure.events import DomainEventPublisher, InMemoryEventBus

EVENT_START = datetime(2025, 6, 1, 8, 0)
EVENT_END = datetime(2025, 6, 3, 23, 0)


class TickingClock:
    """Clock returning a strictly increasing time on every call."""

    def __init__(self, start: datetime = datetime(2025, 5, 1, 9, 0)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def engine(tmp_path) -> Iterator[Engine]:
    engine = build_engine(url=f"sqlite:///{tmp_path / 'regie.db'}")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def uow_manager(engine, event_bus) -> UnitOfWorkManager:
    return UnitOfWorkManager(session_factory(engine), DomainEventPublisher(event_bus))


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id=uuid4(), role=Role.ADMIN)


@pytest.fixture
def regisseur() -> Actor:
    return Actor(user_id=uuid4(), role=Role.REGISSEUR)


@pytest.fixture
def worker() -> Actor:
    return Actor(user_id=uuid4(), role=Role.INTERMITTENT)


@pytest.fixture
def other_worker() -> Actor:
    return Actor(user_id=uuid4(), role=Role.INTERMITTENT)


@pytest.fixture
def event_service(uow_manager, clock) -> EventService:
    return EventService(uow_manager.create_unit_of_work, clock)


@pytest.fixture
def schedule_service(uow_manager, clock) -> ScheduleService:
    return ScheduleService(uow_manager.create_unit_of_work, clock)


@pytest.fixture
def assignment_service(uow_manager, clock) -> AssignmentService:
    return AssignmentService(uow_manager.create_unit_of_work, clock)


@pytest.fixture
def draft_event(event_service, regisseur):
    """Draft event running 2025-06-01 to 2025-06-03."""
    return event_service.create_event(
        regisseur,
        title="Festival d'été",
        start_at=EVENT_START,
        end_at=EVENT_END,
        location="Grande salle",
    )


@pytest.fixture
def published_event(event_service, regisseur, draft_event):
    return event_service.publish_event(regisseur, draft_event.id)


@pytest.fixture
def respond_as(assignment_service, regisseur):
    """Create an assignment for a worker and answer it in their name."""

    def _respond(event_id, worker: Actor, response: AssignmentStatus):
        assignment = assignment_service.create_assignment(
            regisseur, event_id, worker.user_id
        )
        return assignment_service.respond_to_assignment(worker, assignment.id, response)

    return _respond


@pytest.fixture
def client(uow_manager) -> Iterator[TestClient]:
    app = create_app(uow_manager)
    with TestClient(app) as c:
        yield c


def auth_headers(actor: Actor) -> dict[str, str]:
    return {"X-Actor-Id": str(actor.user_id), "X-Actor-Role": actor.role.value}


def new_worker() -> Actor:
    return Actor(user_id=uuid4(), role=Role.INTERMITTENT)
