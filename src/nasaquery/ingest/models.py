"""Response shapes for each NASA endpoint, validated at decode time."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ApodEntry(_Payload):
    """One Astronomy Picture of the Day entry."""

    date: str
    title: str = ""
    explanation: str = ""
    url: Optional[str] = None
    media_type: str


class ApodPayload(RootModel[List[ApodEntry]]):
    pass


class RoverCamera(_Payload):
    full_name: str


class RoverInfo(_Payload):
    name: str


class RoverPhoto(_Payload):
    id: int
    sol: int
    camera: RoverCamera
    img_src: str
    earth_date: str
    rover: RoverInfo


class RoverPhotosPayload(_Payload):
    photos: List[RoverPhoto]


class EpicImage(_Payload):
    """EPIC metadata; ``date`` is the capture date-time, e.g. ``2024-04-01 00:03:42``."""

    image: str
    caption: str = ""
    date: str

    @field_validator("date")
    @classmethod
    def _check_capture_time(cls, value: str) -> str:
        parse_capture_date(value)
        return value


class EpicPayload(RootModel[List[EpicImage]]):
    pass


class Velocity(_Payload):
    kilometers_per_hour: float


class MissDistance(_Payload):
    kilometers: float


class CloseApproach(_Payload):
    close_approach_date: str
    relative_velocity: Velocity
    miss_distance: MissDistance


class DiameterRange(_Payload):
    estimated_diameter_min: float
    estimated_diameter_max: float


class EstimatedDiameter(_Payload):
    meters: DiameterRange


class Asteroid(_Payload):
    name: str
    estimated_diameter: EstimatedDiameter
    is_potentially_hazardous_asteroid: bool
    close_approach_data: List[CloseApproach] = Field(default_factory=list)


class NeoFeedPayload(_Payload):
    near_earth_objects: Dict[str, List[Asteroid]]


class CmrFeed(_Payload):
    entry: Optional[List[Dict[str, Any]]] = None


class CmrPayload(_Payload):
    feed: CmrFeed


def parse_capture_date(value: str) -> date:
    """Return the calendar day of an EPIC capture timestamp."""
    # fromisoformat accepts both "T" and " " as the separator.
    return datetime.fromisoformat(value.strip()).date()
