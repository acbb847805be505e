"""Resolve a named from/to pair to the directional slice of a route's stops.

A route has one canonical order: origin terminal, intermediate stops by
ascending ``stop_order``, destination terminal. Travelling the other way is
the same slice reversed, recorded as ``Direction.REVERSE`` on the plan.
"""

import logging
from dataclasses import dataclass

from route_engine.core.errors import (
    AmbiguousRouteError,
    InsufficientWaypointsError,
    NotFoundError,
    RouteDataError,
)
from route_engine.core.network import Direction, EntityKind, NetworkEntity, RouteRecord, Waypoint

logger = logging.getLogger(__name__)


@dataclass
class RoutePlan:
    route_id: int
    direction: Direction
    waypoints: list[Waypoint]


def terminals_for(route: RouteRecord) -> tuple[NetworkEntity, NetworkEntity]:
    """Origin and destination terminal entities for a route."""
    origin = NetworkEntity(
        id=route.id, name=route.origin_name,
        lat=route.origin_lat, lon=route.origin_lon,
        route_id=route.id, kind=EntityKind.ORIGIN,
    )
    destination = NetworkEntity(
        id=route.id, name=route.destination_name,
        lat=route.destination_lat, lon=route.destination_lon,
        route_id=route.id, kind=EntityKind.DESTINATION,
    )
    return origin, destination


def build_entities(stops: list[NetworkEntity], routes: list[RouteRecord]) -> list[NetworkEntity]:
    """All stops plus both terminals of every route."""
    entities = list(stops)
    for route in routes:
        entities.extend(terminals_for(route))
    return entities


def ordered_route(entities: list[NetworkEntity], route_id: int) -> list[NetworkEntity]:
    """Full canonical sequence for one route: [origin] + stops by stop_order + [destination]."""
    origin = None
    destination = None
    stops = []
    for e in entities:
        if e.route_id != route_id:
            continue
        if e.kind is EntityKind.ORIGIN:
            origin = e
        elif e.kind is EntityKind.DESTINATION:
            destination = e
        else:
            stops.append(e)

    if origin is None or destination is None:
        raise RouteDataError(f"Route {route_id} is missing a terminal")

    seen: set[int] = set()
    for s in stops:
        if s.stop_order is None:
            raise RouteDataError(f"Stop {s.id} ({s.name}) on route {route_id} has no stop_order")
        if s.stop_order in seen:
            raise RouteDataError(f"Duplicate stop_order {s.stop_order} on route {route_id}")
        seen.add(s.stop_order)

    stops.sort(key=lambda s: s.stop_order)
    return [origin, *stops, destination]


def _choose_endpoints(
    from_matches: list[NetworkEntity],
    to_matches: list[NetworkEntity],
) -> tuple[NetworkEntity, NetworkEntity] | None:
    """Pick the (from, to) pair that defines the route to travel.

    Terminal pairs encode direction by themselves, so origin -> destination
    of one route wins first, then destination -> origin. Otherwise the first
    pair sharing a route, which is the stop's own route whenever a stop is
    involved.
    """
    for wanted_from, wanted_to in (
        (EntityKind.ORIGIN, EntityKind.DESTINATION),
        (EntityKind.DESTINATION, EntityKind.ORIGIN),
    ):
        for f in from_matches:
            if f.kind is not wanted_from:
                continue
            for t in to_matches:
                if t.kind is wanted_to and t.route_id == f.route_id:
                    return f, t

    for f in from_matches:
        for t in to_matches:
            if f.route_id == t.route_id:
                return f, t
    return None


def _index_of(sequence: list[NetworkEntity], entity: NetworkEntity) -> int:
    # Terminal names can coincide with stop names, so kind is part of the key
    for i, e in enumerate(sequence):
        if (e.name, e.route_id, e.kind, e.id) == (entity.name, entity.route_id, entity.kind, entity.id):
            return i
    raise NotFoundError(entity.name)


def _to_waypoint(entity: NetworkEntity, position: int) -> Waypoint:
    return Waypoint(
        latitude=entity.lat,
        longitude=entity.lon,
        name=entity.name,
        stop_order=position,
        kind=entity.kind,
        route_id=entity.route_id,
    )


def plan_route(entities: list[NetworkEntity], from_name: str, to_name: str) -> RoutePlan:
    """Resolve names and return the inclusive, direction-aware slice of stops."""
    from_matches = [e for e in entities if e.name == from_name]
    if not from_matches:
        raise NotFoundError(from_name)
    to_matches = [e for e in entities if e.name == to_name]
    if not to_matches:
        raise NotFoundError(to_name)

    endpoints = _choose_endpoints(from_matches, to_matches)
    if endpoints is None:
        raise AmbiguousRouteError(from_name, to_name)
    from_entity, to_entity = endpoints
    route_id = from_entity.route_id

    sequence = ordered_route(entities, route_id)
    from_index = _index_of(sequence, from_entity)
    to_index = _index_of(sequence, to_entity)

    if from_index <= to_index:
        direction = Direction.FORWARD
        indices = list(range(from_index, to_index + 1))
    else:
        direction = Direction.REVERSE
        indices = list(range(from_index, to_index - 1, -1))

    if len(indices) < 2:
        raise InsufficientWaypointsError(
            f"{from_name!r} -> {to_name!r} resolves to a single point on route {route_id}"
        )

    waypoints = [_to_waypoint(sequence[i], i) for i in indices]
    logger.debug(
        "Planned route %d %s: %s -> %s (%d waypoints)",
        route_id, direction.value, from_name, to_name, len(waypoints),
    )
    return RoutePlan(route_id=route_id, direction=direction, waypoints=waypoints)


def assemble(entities: list[NetworkEntity], from_name: str, to_name: str) -> list[Waypoint]:
    """Ordered waypoints from ``from_name`` to ``to_name``, both inclusive."""
    return plan_route(entities, from_name, to_name).waypoints
