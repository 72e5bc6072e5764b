import itertools
import pytest

from grazing_timeline.logic.models import ActivityLog, GrazingEvent, GrazingUnit, Plan
from grazing_timeline.logic.timeline import (
    EventRowAssembler,
    TimelineBuilder,
    UnitDirectory,
    UnitNotFoundError,
    UuidGenerator,
    hours_to_seconds,
)
from grazing_timeline.schemas import TaskStage


class SequenceIdGenerator:
    """Deterministic stand-in for the uuid generator."""

    def __init__(self):
        self.counter = itertools.count(1)

    def generate(self) -> str:
        return f"row-{next(self.counter)}"


def make_event(event_id, start=1000, duration=2, recovery=None, label="Move 1"):
    return GrazingEvent(
        id=event_id,
        start=start,
        duration_hours=duration,
        recovery_hours=recovery,
        log=ActivityLog(id=1, label=label, link="/log/1"),
    )


@pytest.fixture
def plan():
    return Plan(id=7, label="Summer grazing")


@pytest.fixture
def units():
    return UnitDirectory({
        1: GrazingUnit(id=1, label="Herd 1", link="/asset/1"),
        2: GrazingUnit(id=2, label="Herd 2", link="/asset/2"),
        42: GrazingUnit(id=42, label="Paddock A", link="/asset/42"),
    })


@pytest.fixture
def assembler():
    return EventRowAssembler(SequenceIdGenerator())


def test_hours_to_seconds():
    assert hours_to_seconds(2) == 7200
    assert hours_to_seconds(0.5) == 1800
    assert hours_to_seconds(0) == 0
    assert hours_to_seconds(None) == 0


def test_duration_task(assembler):
    row = assembler.assemble(make_event("e1", start=1000, duration=2))
    task = row.tasks[0]
    assert task.start == 1000
    assert task.end == 8200
    assert task.meta.stage == TaskStage.DURATION
    assert task.classes == ["stage", "stage--duration"]
    assert task.id == "grazing-event--duration--e1"


@pytest.mark.parametrize("recovery", [None, 0, 0.0])
def test_recovery_suppressed(assembler, recovery):
    row = assembler.assemble(make_event("e1", recovery=recovery))
    assert len(row.tasks) == 1
    assert row.tasks[0].meta.stage == TaskStage.DURATION


def test_recovery_contiguous_with_duration(assembler):
    row = assembler.assemble(make_event("e1", start=1000, duration=2, recovery=1))
    duration, recovery = row.tasks
    assert recovery.start == 8200
    assert recovery.end == 11800
    assert recovery.start == duration.end
    assert recovery.meta.stage == TaskStage.RECOVERY
    assert recovery.classes == ["stage", "stage--recovery"]
    assert recovery.id == "grazing-event--recovery--e1"


def test_missing_duration_is_zero_length(assembler):
    row = assembler.assemble(make_event("e1", start=5000, duration=None, recovery=1))
    duration, recovery = row.tasks
    assert duration.start == duration.end == 5000
    assert recovery.start == 5000
    assert recovery.end == 8600


def test_row_fields(assembler):
    event = make_event("e1", label="Move cows to north paddock")
    first = assembler.assemble(event)
    second = assembler.assemble(event)
    assert first.label == "Move cows to north paddock"
    assert first.link == "/log/1"
    # Row ids are fresh per render, task ids are stable per event.
    assert first.id == "row-1"
    assert second.id == "row-2"
    assert [t.id for t in first.tasks] == [t.id for t in second.tasks]


def test_uuid_generator_is_unique():
    generator = UuidGenerator()
    assert generator.generate() != generator.generate()


def test_row_cardinality(plan, units):
    events = [make_event("a", recovery=1), make_event("b"), make_event("c", recovery=0.5)]
    rows = TimelineBuilder(units, SequenceIdGenerator()).build(plan, {1: events})
    assert len(rows) == 1
    assert len(rows[0].children) == 3
    assert [len(child.tasks) for child in rows[0].children] == [2, 1, 2]


def test_order_preserved(plan, units):
    events_by_unit = {
        2: [make_event("late", start=90000), make_event("early", start=100)],
        1: [make_event("only", start=50)],
    }
    rows = TimelineBuilder(units, SequenceIdGenerator()).build(plan, events_by_unit)
    assert [row.label for row in rows] == ["Herd 2", "Herd 1"]
    assert [row.id for row in rows] == ["asset--2", "asset--1"]
    assert [child.tasks[0].id for child in rows[0].children] == [
        "grazing-event--duration--late",
        "grazing-event--duration--early",
    ]


def test_empty_input(plan, units):
    builder = TimelineBuilder(units, SequenceIdGenerator())
    assert builder.build(plan, {}) == []
    assert builder.build_response(plan, {}).model_dump() == {"rows": []}


def test_unit_without_events(plan, units):
    rows = TimelineBuilder(units, SequenceIdGenerator()).build(plan, {1: []})
    assert rows[0].children == []
    assert rows[0].expanded is True


def test_unresolved_unit_fails_whole_build(plan, units):
    builder = TimelineBuilder(units, SequenceIdGenerator())
    with pytest.raises(UnitNotFoundError) as exc_info:
        builder.build(plan, {1: [make_event("a")], 99: [make_event("b")]})
    assert exc_info.value.unit_id == 99


def test_build_is_idempotent(plan, units):
    events_by_unit = {1: [make_event("a", recovery=1)], 2: [make_event("b")]}
    first = TimelineBuilder(units, SequenceIdGenerator()).build_response(plan, events_by_unit)
    second = TimelineBuilder(units, SequenceIdGenerator()).build_response(plan, events_by_unit)
    assert first.model_dump_json() == second.model_dump_json()


def test_end_to_end_document(plan, units):
    event = GrazingEvent(
        id="e1",
        start=1000,
        duration_hours=3,
        recovery_hours=0.5,
        log=ActivityLog(id=1, label="Move 1", link="/log/1"),
    )
    response = TimelineBuilder(units, SequenceIdGenerator()).build_response(plan, {42: [event]})
    assert response.model_dump(mode="json") == {
        "rows": [
            {
                "id": "asset--42",
                "label": "Paddock A",
                "link": "/asset/42",
                "expanded": True,
                "children": [
                    {
                        "id": "row-1",
                        "label": "Move 1",
                        "link": "/log/1",
                        "tasks": [
                            {
                                "id": "grazing-event--duration--e1",
                                "start": 1000,
                                "end": 11800,
                                "meta": {"stage": "duration"},
                                "classes": ["stage", "stage--duration"],
                            },
                            {
                                "id": "grazing-event--recovery--e1",
                                "start": 11800,
                                "end": 13600,
                                "meta": {"stage": "recovery"},
                                "classes": ["stage", "stage--recovery"],
                            },
                        ],
                    }
                ],
            }
        ]
    }
