import datetime

from pydantic import BaseModel, Field, conlist


class SearchRequest(BaseModel):
    from_name: str
    to_name: str
    points_per_segment: int | None = Field(default=None, ge=1, le=100)


class TimedStop(BaseModel):
    name: str
    lat: float
    lon: float
    kind: str
    stop_order: int
    eta: datetime.datetime


class SearchResponse(BaseModel):
    route_id: int
    direction: str
    distance_m: float
    stops: list[TimedStop]
    path: list[list[float]]  # [[lat, lon], ...]


class Location(BaseModel):
    lat: float
    lon: float


class TrackRequest(BaseModel):
    location: Location
    path: list[conlist(float, min_length=2)]  # [[lat, lon], ...]


class TrackResponse(BaseModel):
    segment_index: int | None = None
    snapped: list[float] | None = None
    distance_m: float | None = None
    progress: float | None = None


class WaypointIn(BaseModel):
    name: str = ""
    lat: float
    lon: float


class LegIn(BaseModel):
    distance_m: float = 0.0
    duration_s: float
    duration_in_traffic_s: float | None = None


class EtaRequest(BaseModel):
    waypoints: list[WaypointIn]
    legs: list[LegIn] | None = None


class EtaItem(BaseModel):
    name: str
    eta: datetime.datetime


class EtaResponse(BaseModel):
    etas: list[EtaItem]
