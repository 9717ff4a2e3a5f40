"""
Unit tests for the Event aggregate: creation, lifecycle transitions, detail
edits and the queued audit history.
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from hypothesis import given
from hypothesis import strategies as st

from regie.core.rbac import Actor, Role
from regie.domain.shared.exceptions import (
    InvalidRangeError,
    InvalidStateError,
    InvalidTransitionError,
    PermissionDeniedError,
    ValidationError,
)
from regie.domain.staffing.entities.event import Event
from regie.domain.staffing.events import EventStatusChanged
from regie.domain.staffing.value_objects.enums import EventStatus, HistoryAction

NOW = datetime(2025, 5, 1, 9, 0)
AFTER_END = datetime(2025, 6, 4, 9, 0)
REGISSEUR = Actor(user_id=uuid4(), role=Role.REGISSEUR)
WORKER = Actor(user_id=uuid4(), role=Role.INTERMITTENT)


def make_event(status: EventStatus = EventStatus.DRAFT) -> Event:
    event = Event.create(
        REGISSEUR,
        title="Festival d'été",
        start_at=datetime(2025, 6, 1, 8, 0),
        end_at=datetime(2025, 6, 3, 23, 0),
        now=NOW,
    )
    event.pop_pending_history()
    event.status = status
    return event


class TestEventCreation:
    def test_create_draft_event(self):
        event = Event.create(
            REGISSEUR,
            title="  Festival d'été ",
            start_at=datetime(2025, 6, 1, 8, 0),
            end_at=datetime(2025, 6, 3, 23, 0),
            now=NOW,
        )

        assert event.status == EventStatus.DRAFT
        assert event.title == "Festival d'été"
        assert event.created_by == REGISSEUR.user_id
        assert event.published_at is None
        assert event.is_valid()
        history = event.pop_pending_history()
        assert [h.action for h in history] == [HistoryAction.CREATE]

    def test_aware_datetimes_are_stored_as_naive_utc(self):
        paris = timezone(timedelta(hours=2))
        event = Event.create(
            REGISSEUR,
            title="Concert",
            start_at=datetime(2025, 6, 1, 10, 0, tzinfo=paris),
            end_at=datetime(2025, 6, 1, 23, 0, tzinfo=paris),
            now=NOW,
        )

        assert event.start_at == datetime(2025, 6, 1, 8, 0)
        assert event.start_at.tzinfo is None

    def test_end_not_after_start_fails(self):
        with pytest.raises(InvalidRangeError):
            Event.create(
                REGISSEUR,
                title="Concert",
                start_at=datetime(2025, 6, 1, 8, 0),
                end_at=datetime(2025, 6, 1, 8, 0),
            )

    def test_worker_cannot_create_events(self):
        with pytest.raises(PermissionDeniedError):
            Event.create(
                WORKER,
                title="Concert",
                start_at=datetime(2025, 6, 1, 8, 0),
                end_at=datetime(2025, 6, 1, 9, 0),
            )

    def test_date_range_is_inclusive(self):
        event = make_event()

        assert event.covers_date(date(2025, 6, 1))
        assert event.covers_date(date(2025, 6, 3))
        assert not event.covers_date(date(2025, 6, 4))
        assert not event.covers_date(date(2025, 5, 31))


class TestEventTransitions:
    def test_publish_sets_published_at_and_raises_event(self):
        event = make_event()

        old = event.transition_to(EventStatus.PUBLISHED, REGISSEUR, NOW)

        assert old == EventStatus.DRAFT
        assert event.status == EventStatus.PUBLISHED
        assert event.published_at == NOW
        [domain_event] = event.get_domain_events()
        assert isinstance(domain_event, EventStatusChanged)
        assert domain_event.new_status == EventStatus.PUBLISHED
        [entry] = event.pop_pending_history()
        assert entry.action == HistoryAction.PUBLISH
        assert entry.details == {"from": "draft", "to": "published"}

    def test_published_at_is_set_only_once(self):
        event = make_event()
        first = datetime(2025, 5, 2)

        event.transition_to(EventStatus.PUBLISHED, REGISSEUR, first)
        event.transition_to(EventStatus.DRAFT, REGISSEUR, first + timedelta(days=1))
        event.transition_to(EventStatus.PUBLISHED, REGISSEUR, first + timedelta(days=2))

        assert event.published_at == first
        actions = [h.action for h in event.pop_pending_history()]
        assert actions == [
            HistoryAction.PUBLISH,
            HistoryAction.UNPUBLISH,
            HistoryAction.PUBLISH,
        ]

    @pytest.mark.parametrize(
        "current, target",
        [
            (EventStatus.DRAFT, EventStatus.COMPLETED),
            (EventStatus.DRAFT, EventStatus.CANCELLED),
            (EventStatus.DRAFT, EventStatus.DRAFT),
            (EventStatus.PUBLISHED, EventStatus.PUBLISHED),
        ],
    )
    def test_edges_outside_the_lifecycle_fail(self, current, target):
        event = make_event(current)

        with pytest.raises(InvalidTransitionError):
            event.transition_to(target, REGISSEUR, NOW)
        assert event.status == current

    @given(
        terminal=st.sampled_from([EventStatus.CANCELLED, EventStatus.COMPLETED]),
        target=st.sampled_from(list(EventStatus)),
    )
    def test_terminal_status_rejects_every_transition(self, terminal, target):
        event = make_event(terminal)

        with pytest.raises(InvalidTransitionError):
            event.transition_to(target, REGISSEUR, NOW)
        assert event.status == terminal
        assert event.get_domain_events() == []

    def test_completed_event_cannot_be_republished(self):
        event = make_event(EventStatus.PUBLISHED)
        event.transition_to(EventStatus.COMPLETED, REGISSEUR, AFTER_END)

        with pytest.raises(InvalidTransitionError) as exc_info:
            event.transition_to(EventStatus.PUBLISHED, REGISSEUR, AFTER_END)

        assert exc_info.value.details["current_status"] == "completed"

    def test_completion_waits_for_event_end(self):
        event = make_event(EventStatus.PUBLISHED)
        just_before_end = event.end_at - timedelta(minutes=1)

        with pytest.raises(InvalidTransitionError) as exc_info:
            event.transition_to(EventStatus.COMPLETED, REGISSEUR, just_before_end)

        assert exc_info.value.message.endswith("event has not ended")
        assert event.status == EventStatus.PUBLISHED
        assert event.get_domain_events() == []

    def test_completion_allowed_once_event_has_ended(self):
        event = make_event(EventStatus.PUBLISHED)

        event.transition_to(EventStatus.COMPLETED, REGISSEUR, event.end_at)

        assert event.status == EventStatus.COMPLETED

    def test_worker_cannot_transition(self):
        event = make_event()

        with pytest.raises(PermissionDeniedError):
            event.transition_to(EventStatus.PUBLISHED, WORKER, NOW)


class TestEventEdits:
    def test_update_details_records_changed_fields(self):
        event = make_event()

        applied = event.update_details(
            REGISSEUR, {"title": "Festival d'automne", "location": "Grande salle"}, NOW
        )

        assert set(applied) == {"title", "location"}
        assert event.updated_at == NOW
        [entry] = event.pop_pending_history()
        assert entry.action == HistoryAction.UPDATE
        assert entry.details == {"fields": ["location", "title"]}

    def test_unchanged_values_record_nothing(self):
        event = make_event()

        assert event.update_details(REGISSEUR, {"title": event.title}, NOW) == {}
        assert event.pop_pending_history() == []

    def test_window_inversion_fails(self):
        event = make_event()

        with pytest.raises(InvalidRangeError):
            event.update_details(REGISSEUR, {"end_at": datetime(2025, 5, 1)}, NOW)

    def test_unknown_field_fails(self):
        event = make_event()

        with pytest.raises(ValidationError):
            event.update_details(REGISSEUR, {"status": "published"}, NOW)

    @pytest.mark.parametrize("status", [EventStatus.CANCELLED, EventStatus.COMPLETED])
    def test_terminal_event_is_read_only(self, status):
        event = make_event(status)

        with pytest.raises(InvalidStateError):
            event.update_details(REGISSEUR, {"title": "Autre"}, NOW)

    @pytest.mark.parametrize(
        "status", [EventStatus.PUBLISHED, EventStatus.CANCELLED, EventStatus.COMPLETED]
    )
    def test_only_drafts_are_deletable(self, status):
        with pytest.raises(InvalidStateError):
            make_event(status).ensure_deletable()

    def test_draft_is_deletable(self):
        make_event().ensure_deletable()
