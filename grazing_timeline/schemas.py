from pydantic import BaseModel, ConfigDict, Field
from typing import List
import enum

# Base schemas
class BaseSchema(BaseModel):
    """Base schema for all Pydantic models to inherit from."""
    model_config = ConfigDict(from_attributes=True)

class TaskStage(str, enum.Enum):
    """Stage of a grazing event a timeline task represents."""
    DURATION = "duration"
    RECOVERY = "recovery"

# Timeline schemas, shaped exactly as the timeline widget consumes them
class TaskMeta(BaseSchema):
    """Schema for the metadata attached to a timeline task."""
    stage: TaskStage

class TimelineTask(BaseSchema):
    """Schema for a single time-ranged bar within a row. start/end are epoch seconds."""
    id: str
    start: int
    end: int
    meta: TaskMeta
    classes: List[str] = Field(default_factory=list)

class TimelineEventRow(BaseSchema):
    """Schema for the row of a single grazing event."""
    id: str
    label: str
    link: str
    tasks: List[TimelineTask] = Field(default_factory=list)

class TimelineRow(BaseSchema):
    """Schema for the row of a grazing unit, holding its grazing event rows."""
    id: str
    label: str
    link: str
    expanded: bool = True
    children: List[TimelineEventRow] = Field(default_factory=list)

class TimelineResponse(BaseSchema):
    """Schema for the grazing plan timeline document."""
    rows: List[TimelineRow] = Field(default_factory=list)

# System schemas
class HealthStatus(BaseSchema):
    """Schema for the health check response."""
    status: str
    service: str
    version: str
