import pytest

from route_engine.core.catalog import NetworkCatalog
from route_engine.core.network import NetworkEntity, RouteRecord


def make_routes() -> list[RouteRecord]:
    """Two Gaborone combi routes sharing the Main Mall terminal."""
    return [
        RouteRecord(
            id=1, origin_name="Main Mall", destination_name="Game City",
            origin_lat=-24.6587, origin_lon=25.9022,
            destination_lat=-24.6869, destination_lon=25.8771,
        ),
        RouteRecord(
            id=2, origin_name="Main Mall", destination_name="Broadhurst",
            origin_lat=-24.6587, origin_lon=25.9022,
            destination_lat=-24.6252, destination_lon=25.9369,
        ),
    ]


def make_stops() -> list[NetworkEntity]:
    # Deliberately listed out of stop_order
    return [
        NetworkEntity(id=12, name="Kgale View", lat=-24.6745, lon=25.8880, route_id=1, stop_order=2),
        NetworkEntity(id=11, name="Bus Rank", lat=-24.6650, lon=25.8960, route_id=1, stop_order=1),
        NetworkEntity(id=13, name="Riverwalk", lat=-24.6810, lon=25.8820, route_id=1, stop_order=3),
        NetworkEntity(id=21, name="Village", lat=-24.6480, lon=25.9150, route_id=2, stop_order=1),
        NetworkEntity(id=22, name="Game City", lat=-24.6350, lon=25.9260, route_id=2, stop_order=2),
    ]


@pytest.fixture
def catalog() -> NetworkCatalog:
    cat = NetworkCatalog()
    cat.load_snapshot(make_stops(), make_routes())
    return cat


@pytest.fixture
def entities(catalog) -> list[NetworkEntity]:
    return catalog.entities


