import logging
from typing import Dict, List
from fastapi import APIRouter, HTTPException, status

from grazing_timeline import schemas
from grazing_timeline.api_v1.deps import GrazingPlanServiceDep, IdGeneratorDep
from grazing_timeline.logic.grazing_plan import GrazingPlanService, PlanNotFoundError
from grazing_timeline.logic.models import GrazingEvent, Plan
from grazing_timeline.logic.timeline import IdGenerator, TimelineBuilder, TimelineDataError

router = APIRouter()
logger = logging.getLogger(__name__)

async def get_plan_or_404(service: GrazingPlanService, plan_id: int) -> Plan:
    try:
        return await service.get_plan(plan_id)
    except PlanNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Plan not found"
        )

async def build_timeline(
    service: GrazingPlanService,
    id_generator: IdGenerator,
    plan: Plan,
    grazing_events_by_unit: Dict[int, List[GrazingEvent]],
) -> schemas.TimelineResponse:
    units = await service.load_units(grazing_events_by_unit.keys())
    builder = TimelineBuilder(units, id_generator)
    try:
        return builder.build_response(plan, grazing_events_by_unit)
    except TimelineDataError as e:
        logger.error(f"Failed to build grazing timeline for plan {plan.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build grazing timeline"
        )

@router.get("/{plan_id}/timeline/asset", response_model=schemas.TimelineResponse)
async def get_timeline_by_asset(
    plan_id: int,
    service: GrazingPlanServiceDep,
    id_generator: IdGeneratorDep,
):
    """
    Grazing plan timeline with one row per animal asset moved by the plan's grazing events.
    """
    plan = await get_plan_or_404(service, plan_id)
    grazing_events = await service.get_grazing_events_by_asset(plan)
    return await build_timeline(service, id_generator, plan, grazing_events)

@router.get("/{plan_id}/timeline/location", response_model=schemas.TimelineResponse)
async def get_timeline_by_location(
    plan_id: int,
    service: GrazingPlanServiceDep,
    id_generator: IdGeneratorDep,
):
    """
    Grazing plan timeline with one row per location the plan's grazing events move animals to.
    """
    plan = await get_plan_or_404(service, plan_id)
    grazing_events = await service.get_grazing_events_by_location(plan)
    return await build_timeline(service, id_generator, plan, grazing_events)
