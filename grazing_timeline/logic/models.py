# grazing_timeline/logic/models.py

from dataclasses import dataclass
from typing import Optional, Union

# Asset and location ids are integers in the database, plan record ids may be either.
RecordId = Union[int, str]


@dataclass(frozen=True)
class Plan:
    """A grazing plan reference."""
    id: int
    label: str


@dataclass(frozen=True)
class ActivityLog:
    """The movement log a grazing event originates from. Only used for display."""
    id: RecordId
    label: str
    link: str


@dataclass(frozen=True)
class GrazingUnit:
    """An asset or location that animals occupy during a grazing event."""
    id: RecordId
    label: str
    link: str


@dataclass(frozen=True)
class GrazingEvent:
    """
    One grazing occupation of a unit.

    `start` is an epoch timestamp in seconds. A missing duration counts as zero,
    a missing or zero recovery means the event has no recovery phase.
    """
    id: RecordId
    start: int
    log: ActivityLog
    duration_hours: Optional[float] = None
    recovery_hours: Optional[float] = None
