"""
Grazing timeline module.

Turns grazing events grouped by grazing unit into the row/task structure the
timeline widget renders. Each unit becomes an expanded parent row, each event a
child row holding a duration task and, when the event has one, a recovery task.
"""

import logging
import uuid
from typing import List, Mapping, Protocol, Sequence

from grazing_timeline import schemas
from grazing_timeline.logic.models import GrazingEvent, GrazingUnit, Plan, RecordId

log = logging.getLogger(__name__)

SECONDS_PER_HOUR = 60 * 60
TASK_ID_PREFIX = "grazing-event"
UNIT_ROW_ID_PREFIX = "asset"


class TimelineDataError(Exception):
    """The upstream grazing data cannot be turned into a timeline."""


class UnitNotFoundError(TimelineDataError):
    def __init__(self, unit_id: RecordId):
        super().__init__(f"Grazing unit {unit_id!r} does not resolve to a known record")
        self.unit_id = unit_id


class IdGenerator(Protocol):
    def generate(self) -> str:
        ...


class UnitResolver(Protocol):
    def resolve_unit(self, unit_id: RecordId) -> GrazingUnit:
        ...


class UuidGenerator:
    """Generates a fresh UUID4 string on each call."""

    def generate(self) -> str:
        return str(uuid.uuid4())


class UnitDirectory:
    """In-memory unit resolver over records loaded ahead of the build."""

    def __init__(self, units: Mapping[RecordId, GrazingUnit]):
        self._units = dict(units)

    def __len__(self) -> int:
        return len(self._units)

    def resolve_unit(self, unit_id: RecordId) -> GrazingUnit:
        try:
            return self._units[unit_id]
        except KeyError:
            raise UnitNotFoundError(unit_id) from None


def hours_to_seconds(hours) -> int:
    """Convert a number of hours to whole seconds. None counts as zero."""
    if not hours:
        return 0
    return int(round(hours * SECONDS_PER_HOUR))


def _build_task(event: GrazingEvent, stage: schemas.TaskStage, start: int, end: int) -> schemas.TimelineTask:
    return schemas.TimelineTask(
        id=f"{TASK_ID_PREFIX}--{stage.value}--{event.id}",
        start=start,
        end=end,
        meta=schemas.TaskMeta(stage=stage),
        classes=["stage", f"stage--{stage.value}"],
    )


class EventRowAssembler:
    """Builds the child row for a single grazing event."""

    def __init__(self, id_generator: IdGenerator):
        self.id_generator = id_generator

    def build_tasks(self, event: GrazingEvent) -> List[schemas.TimelineTask]:
        duration_end = event.start + hours_to_seconds(event.duration_hours)
        tasks = [_build_task(event, schemas.TaskStage.DURATION, event.start, duration_end)]

        # Recovery picks up exactly where the grazing duration ends.
        if event.recovery_hours is not None and event.recovery_hours > 0:
            recovery_end = duration_end + hours_to_seconds(event.recovery_hours)
            tasks.append(_build_task(event, schemas.TaskStage.RECOVERY, duration_end, recovery_end))
        return tasks

    def assemble(self, event: GrazingEvent) -> schemas.TimelineEventRow:
        # The row id is unique per render, task ids stay stable per event.
        return schemas.TimelineEventRow(
            id=self.id_generator.generate(),
            label=event.log.label,
            link=event.log.link,
            tasks=self.build_tasks(event),
        )


class TimelineBuilder:
    """
    Nests grazing event rows under one parent row per grazing unit.

    Output order mirrors the input mapping and each unit's event sequence.
    Nothing is sorted here; ordering is up to the query that produced the events.
    """

    def __init__(self, unit_resolver: UnitResolver, id_generator: IdGenerator):
        self.unit_resolver = unit_resolver
        self.assembler = EventRowAssembler(id_generator)

    def build_unit_row(self, unit_id: RecordId, events: Sequence[GrazingEvent]) -> schemas.TimelineRow:
        unit = self.unit_resolver.resolve_unit(unit_id)
        row = schemas.TimelineRow(
            id=f"{UNIT_ROW_ID_PREFIX}--{unit_id}",
            label=unit.label,
            link=unit.link,
            expanded=True,
            children=[],
        )
        for event in events:
            row.children.append(self.assembler.assemble(event))
        log.debug(f"Built timeline row for unit {unit_id} with {len(row.children)} events.")
        return row

    def build(self, plan: Plan, events_by_unit: Mapping[RecordId, Sequence[GrazingEvent]]) -> List[schemas.TimelineRow]:
        rows = [self.build_unit_row(unit_id, events) for unit_id, events in events_by_unit.items()]
        log.info(f"Built grazing timeline for plan {plan.id} with {len(rows)} rows.")
        return rows

    def build_response(self, plan: Plan, events_by_unit: Mapping[RecordId, Sequence[GrazingEvent]]) -> schemas.TimelineResponse:
        return schemas.TimelineResponse(rows=self.build(plan, events_by_unit))

