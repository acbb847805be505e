from pydantic import BaseModel


class RouteInfo(BaseModel):
    id: int
    origin_name: str
    destination_name: str
    origin: list[float]  # [lat, lon]
    destination: list[float]


class StopInfo(BaseModel):
    id: int
    name: str
    lat: float
    lon: float
    route_id: int
    stop_order: int
