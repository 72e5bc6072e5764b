# grazing_timeline/logic/grazing_plan.py
"""
Grazing plan query service.

Reads a grazing plan's events from the farm database and groups them by the
grazing unit they concern: the animal assets a movement log moves, or the
locations it moves them to. Results are plain domain values, ready for
TimelineBuilder.
"""

from typing import Dict, Iterable, List
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from grazing_timeline.core.models import (
    Asset as AssetModel,
    GrazingEvent as GrazingEventModel,
    Log as LogModel,
    Plan as PlanModel,
)
from grazing_timeline.core.settings import settings
from grazing_timeline.logic.models import ActivityLog, GrazingEvent, GrazingUnit, Plan
from grazing_timeline.logic.timeline import UnitDirectory

log = logging.getLogger(__name__)

GRAZING_PLAN_TYPE = "grazing"


class PlanNotFoundError(LookupError):
    def __init__(self, plan_id: int):
        super().__init__(f"Grazing plan {plan_id} not found")
        self.plan_id = plan_id


def asset_link(asset_id: int) -> str:
    return f"{settings.LINK_BASE_URL}/asset/{asset_id}"


def log_link(log_id: int) -> str:
    return f"{settings.LINK_BASE_URL}/log/{log_id}"


def to_grazing_event(record: GrazingEventModel) -> GrazingEvent:
    return GrazingEvent(
        id=record.id,
        start=record.start,
        duration_hours=record.duration,
        recovery_hours=record.recovery,
        log=ActivityLog(id=record.log.id, label=record.log.name, link=log_link(record.log.id)),
    )


class GrazingPlanService:
    """Read-only access to grazing plans and their events."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_plan(self, plan_id: int) -> Plan:
        plan = await self.db.get(PlanModel, plan_id)
        if plan is None or plan.type != GRAZING_PLAN_TYPE:
            raise PlanNotFoundError(plan_id)
        return Plan(id=plan.id, label=plan.name)

    async def get_grazing_event_records(self, plan: Plan) -> List[GrazingEventModel]:
        result = await self.db.execute(
            select(GrazingEventModel)
            .options(
                selectinload(GrazingEventModel.log).selectinload(LogModel.assets),
                selectinload(GrazingEventModel.log).selectinload(LogModel.locations),
            )
            .where(GrazingEventModel.plan_id == plan.id)
            .order_by(GrazingEventModel.start.asc(), GrazingEventModel.id.asc())
        )
        return list(result.scalars().all())

    async def get_grazing_events_by_asset(self, plan: Plan) -> Dict[int, List[GrazingEvent]]:
        records = await self.get_grazing_event_records(plan)
        return self._group_by_unit(records, lambda record: record.log.assets)

    async def get_grazing_events_by_location(self, plan: Plan) -> Dict[int, List[GrazingEvent]]:
        records = await self.get_grazing_event_records(plan)
        return self._group_by_unit(records, lambda record: record.log.locations)

    def _group_by_unit(self, records: Iterable[GrazingEventModel], units_of) -> Dict[int, List[GrazingEvent]]:
        # Units are keyed in the order they are first referenced.
        events_by_unit: Dict[int, List[GrazingEvent]] = {}
        for record in records:
            units = units_of(record)
            if not units:
                log.debug(f"Grazing event {record.id} has no units in this view. Skipping.")
                continue
            event = to_grazing_event(record)
            for unit in units:
                events_by_unit.setdefault(unit.id, []).append(event)
        return events_by_unit

    async def load_units(self, unit_ids: Iterable[int]) -> UnitDirectory:
        unit_ids = list(unit_ids)
        if not unit_ids:
            return UnitDirectory({})
        result = await self.db.execute(select(AssetModel).where(AssetModel.id.in_(unit_ids)))
        units = {
            asset.id: GrazingUnit(id=asset.id, label=asset.name, link=asset_link(asset.id))
            for asset in result.scalars().all()
        }
        if len(units) < len(unit_ids):
            missing = sorted(set(unit_ids) - set(units))
            log.warning(f"Grazing units {missing} could not be loaded.")
        return UnitDirectory(units)
