"""Network entities shared by the assembler, directions client and ETA builder."""

import datetime
import enum
from dataclasses import dataclass

# (latitude, longitude)
LatLng = tuple[float, float]


class EntityKind(str, enum.Enum):
    STOP = "stop"
    ORIGIN = "origin"
    DESTINATION = "destination"


class Direction(str, enum.Enum):
    FORWARD = "forward"  # origin -> destination, ascending stop_order
    REVERSE = "reverse"


@dataclass(frozen=True)
class RouteRecord:
    id: int
    origin_name: str
    destination_name: str
    origin_lat: float
    origin_lon: float
    destination_lat: float
    destination_lon: float


@dataclass(frozen=True)
class NetworkEntity:
    """A stop or a route terminal.

    Terminals carry ``stop_order=None``: their position at either end of the
    route comes from ``kind``, not from a reserved number.
    """

    id: int
    name: str
    lat: float
    lon: float
    route_id: int
    kind: EntityKind = EntityKind.STOP
    stop_order: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.kind is not EntityKind.STOP


@dataclass
class Waypoint:
    latitude: float
    longitude: float
    name: str
    stop_order: int  # position in the route's full ordered list
    kind: EntityKind = EntityKind.STOP
    route_id: int | None = None


@dataclass(frozen=True)
class Leg:
    distance_m: float
    duration_s: float
    duration_in_traffic_s: float | None = None

    @property
    def effective_duration_s(self) -> float:
        if self.duration_in_traffic_s is not None:
            return self.duration_in_traffic_s
        return self.duration_s


@dataclass
class TimedWaypoint:
    waypoint: Waypoint
    eta: datetime.datetime
