"""
Schedule service tests: the write path checks, conflict acknowledgement,
duplication, reordering and the grouped listing.
"""

from datetime import date, time
from uuid import uuid4

import pytest

from regie.domain.shared.exceptions import (
    ConflictsPendingError,
    EntityNotFoundError,
    InvalidRangeError,
    InvalidStateError,
    OutOfRangeError,
    PermissionDeniedError,
    ValidationError,
)
from regie.domain.staffing.events import ScheduleConflictOverridden
from regie.domain.staffing.value_objects.enums import TargetAudience

JUNE_2 = date(2025, 6, 2)


def block_data(start="09:00", end="12:00", day=JUNE_2, audience=("both",), **extra):
    return {
        "schedule_date": day,
        "start_time": start,
        "end_time": end,
        "title": extra.pop("title", "Montage"),
        "target_audience": list(audience),
        **extra,
    }


@pytest.fixture
def morning(schedule_service, regisseur, published_event):
    """09:00-12:00 on June 2nd for everyone."""
    return schedule_service.create_schedule(
        regisseur, published_event.id, block_data(title="Montage")
    ).schedule


class TestCreateSchedule:
    def test_create_schedule(self, schedule_service, regisseur, published_event):
        result = schedule_service.create_schedule(
            regisseur,
            published_event.id,
            block_data(required_skills=["son"], is_mandatory=True),
        )

        assert result.overridden_conflicts == []
        assert result.schedule.start_time == time(9, 0)
        assert result.schedule.required_skills == ["son"]
        assert result.schedule.position == 0

    def test_out_of_window_date_fails(self, schedule_service, regisseur, published_event):
        with pytest.raises(OutOfRangeError):
            schedule_service.create_schedule(
                regisseur, published_event.id, block_data(day=date(2025, 6, 4))
            )

    def test_inverted_times_fail(self, schedule_service, regisseur, published_event):
        with pytest.raises(InvalidRangeError):
            schedule_service.create_schedule(
                regisseur, published_event.id, block_data(start="12:00", end="09:00")
            )

    def test_malformed_clock_is_a_validation_error(
        self, schedule_service, regisseur, published_event
    ):
        with pytest.raises(ValidationError):
            schedule_service.create_schedule(
                regisseur, published_event.id, block_data(start="25:00")
            )

    def test_conflict_requires_acknowledgement(
        self, schedule_service, regisseur, published_event, morning
    ):
        overlapping = block_data(start="11:00", end="13:00", audience=("techniques",))

        with pytest.raises(ConflictsPendingError) as exc_info:
            schedule_service.create_schedule(regisseur, published_event.id, overlapping)

        assert [c.id for c in exc_info.value.conflicts] == [morning.id]
        [day] = schedule_service.list_schedules(regisseur, published_event.id)
        assert len(day.schedules) == 1

    def test_acknowledged_conflict_is_written_and_audited(
        self,
        schedule_service,
        event_service,
        event_bus,
        regisseur,
        published_event,
        morning,
    ):
        result = schedule_service.create_schedule(
            regisseur,
            published_event.id,
            block_data(start="11:00", end="13:00"),
            acknowledge_conflicts=True,
        )

        assert [c.id for c in result.overridden_conflicts] == [morning.id]
        assert result.schedule.position == 1
        entry = event_service.get_history(regisseur, published_event.id)[-1]
        assert entry.details["overridden_conflicts"] == [str(morning.id)]
        [overridden] = event_bus.get_event_history(ScheduleConflictOverridden)
        assert overridden.conflicting_ids == [morning.id]

    def test_back_to_back_blocks_do_not_conflict(
        self, schedule_service, regisseur, published_event, morning
    ):
        result = schedule_service.create_schedule(
            regisseur, published_event.id, block_data(start="12:00", end="14:00")
        )

        assert result.overridden_conflicts == []

    def test_worker_cannot_create(self, schedule_service, worker, published_event):
        with pytest.raises(PermissionDeniedError):
            schedule_service.create_schedule(worker, published_event.id, block_data())

    def test_cancelled_event_rejects_schedules(
        self, schedule_service, event_service, regisseur, published_event
    ):
        event_service.cancel_event(regisseur, published_event.id)

        with pytest.raises(InvalidStateError):
            schedule_service.create_schedule(regisseur, published_event.id, block_data())


class TestEditSchedule:
    def test_edit_checks_against_other_blocks_only(
        self, schedule_service, regisseur, morning
    ):
        result = schedule_service.edit_schedule(
            regisseur, morning.id, {"end_time": "12:30", "title": "Montage son"}
        )

        assert result.schedule.end_time == time(12, 30)
        assert result.schedule.title == "Montage son"
        assert result.overridden_conflicts == []

    def test_edit_into_conflict(self, schedule_service, regisseur, published_event, morning):
        afternoon = schedule_service.create_schedule(
            regisseur, published_event.id, block_data(start="14:00", end="16:00")
        ).schedule

        with pytest.raises(ConflictsPendingError):
            schedule_service.edit_schedule(regisseur, afternoon.id, {"start_time": "11:00"})

        result = schedule_service.edit_schedule(
            regisseur, afternoon.id, {"start_time": "11:00"}, acknowledge_conflicts=True
        )
        assert [c.id for c in result.overridden_conflicts] == [morning.id]

    def test_edit_out_of_window(self, schedule_service, regisseur, morning):
        with pytest.raises(OutOfRangeError):
            schedule_service.edit_schedule(
                regisseur, morning.id, {"schedule_date": date(2025, 5, 31)}
            )

    def test_edit_unknown_schedule(self, schedule_service, regisseur):
        with pytest.raises(EntityNotFoundError):
            schedule_service.edit_schedule(regisseur, uuid4(), {"title": "X"})

    def test_edit_non_editable_field(self, schedule_service, regisseur, morning):
        with pytest.raises(ValidationError):
            schedule_service.edit_schedule(regisseur, morning.id, {"position": 4})


class TestDuplicateAndDelete:
    def test_duplicate_same_day_needs_acknowledgement(
        self, schedule_service, regisseur, morning
    ):
        with pytest.raises(ConflictsPendingError):
            schedule_service.duplicate_schedule(regisseur, morning.id)

    def test_duplicate_to_other_day(self, schedule_service, regisseur, morning):
        result = schedule_service.duplicate_schedule(
            regisseur, morning.id, target_date=date(2025, 6, 3)
        )

        assert result.schedule.id != morning.id
        assert result.schedule.title == "Copie de Montage"
        assert result.schedule.schedule_date == date(2025, 6, 3)

    def test_delete_schedule(self, schedule_service, regisseur, morning):
        schedule_service.delete_schedule(regisseur, morning.id)

        with pytest.raises(EntityNotFoundError):
            schedule_service.get_schedule(regisseur, morning.id)


class TestReorderAndListing:
    def test_reorder_rewrites_positions(
        self, schedule_service, regisseur, published_event, morning
    ):
        second = schedule_service.create_schedule(
            regisseur,
            published_event.id,
            block_data(start="09:00", end="12:00", audience=("artistes",)),
            acknowledge_conflicts=True,
        ).schedule

        reordered = schedule_service.reorder_schedules(
            regisseur, published_event.id, JUNE_2, [second.id, morning.id]
        )

        assert [(s.id, s.position) for s in reordered] == [(second.id, 0), (morning.id, 1)]
        [day] = schedule_service.list_schedules(regisseur, published_event.id)
        assert [s.id for s in day.schedules] == [second.id, morning.id]

    def test_reorder_requires_exact_id_set(
        self, schedule_service, regisseur, published_event, morning
    ):
        with pytest.raises(ValidationError) as exc_info:
            schedule_service.reorder_schedules(
                regisseur, published_event.id, JUNE_2, [morning.id, morning.id]
            )

        assert exc_info.value.details["expected"] == [str(morning.id)]

    def test_listing_groups_by_date_and_filters_audience(
        self, schedule_service, regisseur, worker, published_event, morning
    ):
        schedule_service.create_schedule(
            regisseur,
            published_event.id,
            block_data(day=date(2025, 6, 1), audience=("artistes",), title="Filage"),
        )

        days = schedule_service.list_schedules(regisseur, published_event.id)
        techniques = schedule_service.list_schedules(
            worker, published_event.id, TargetAudience.TECHNIQUES
        )

        assert [d.schedule_date for d in days] == [date(2025, 6, 1), JUNE_2]
        assert [d.schedule_date for d in techniques] == [JUNE_2]

    def test_listing_flags_acknowledged_overlaps(
        self, schedule_service, regisseur, published_event, morning
    ):
        overlap = schedule_service.create_schedule(
            regisseur,
            published_event.id,
            block_data(start="11:00", end="13:00", audience=("techniques",)),
            acknowledge_conflicts=True,
        ).schedule
        schedule_service.create_schedule(
            regisseur,
            published_event.id,
            block_data(start="14:00", end="15:00", audience=("artistes",)),
        )

        [day] = schedule_service.list_schedules(regisseur, published_event.id)
        [artistes_day] = schedule_service.list_schedules(
            regisseur, published_event.id, TargetAudience.ARTISTES
        )

        assert day.conflicting_ids == [morning.id, overlap.id]
        assert artistes_day.conflicting_ids == []

    def test_conflict_preview_writes_nothing(
        self, schedule_service, regisseur, published_event, morning
    ):
        conflicts = schedule_service.list_conflicts(
            regisseur, published_event.id, block_data(start="10:00", end="11:00")
        )
        own = schedule_service.list_conflicts(
            regisseur, published_event.id, {"end_time": "13:00"}, schedule_id=morning.id
        )

        assert [c.id for c in conflicts] == [morning.id]
        assert own == []
        [day] = schedule_service.list_schedules(regisseur, published_event.id)
        assert len(day.schedules) == 1

    def test_workers_cannot_list_draft_schedules(
        self, schedule_service, worker, draft_event
    ):
        with pytest.raises(EntityNotFoundError):
            schedule_service.list_schedules(worker, draft_event.id)
