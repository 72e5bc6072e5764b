from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from grazing_timeline.core.database import get_db
from grazing_timeline.logic.grazing_plan import GrazingPlanService
from grazing_timeline.logic.timeline import IdGenerator, UuidGenerator

def get_grazing_plan_service(db: AsyncSession = Depends(get_db)) -> GrazingPlanService:
    """
    Dependency to get the grazing plan query service bound to the request's session.
    """
    return GrazingPlanService(db)

def get_id_generator() -> IdGenerator:
    """
    Dependency to get the generator for per-render row ids.
    Overridden in tests with a deterministic sequence.
    """
    return UuidGenerator()

GrazingPlanServiceDep = Annotated[GrazingPlanService, Depends(get_grazing_plan_service)]
IdGeneratorDep = Annotated[IdGenerator, Depends(get_id_generator)]
