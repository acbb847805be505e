"""WebSocket endpoint for live route search and rider tracking.

Client messages (JSON):
    {"type": "search", "from": "...", "to": "...", "points_per_segment": 10}
    {"type": "location", "lat": ..., "lon": ...}

Server messages: "route", "position" and "error".
"""

import asyncio
import logging

import orjson
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from route_engine.api.search import error_payload, search_response
from route_engine.core.errors import RouteEngineError
from route_engine.core.search import SearchSession
from route_engine.schemas.search import SearchRequest

logger = logging.getLogger(__name__)

router = APIRouter()

# Will be set by main.py on startup
route_search = None


async def _send(websocket: WebSocket, payload: dict) -> None:
    await websocket.send_bytes(orjson.dumps(payload))


async def _run_search(websocket: WebSocket, session: SearchSession, req: SearchRequest) -> None:
    try:
        result = await session.search(
            req.from_name, req.to_name, points_per_segment=req.points_per_segment,
        )
    except RouteEngineError as e:
        await _send(websocket, {"type": "error", **error_payload(e)})
        return
    if result is None:
        return  # superseded by a newer search
    payload = search_response(result).model_dump(mode="json")
    payload["type"] = "route"
    await _send(websocket, payload)


def _position_payload(session: SearchSession, msg: dict) -> dict:
    try:
        location = (float(msg["lat"]), float(msg["lon"]))
    except (KeyError, TypeError, ValueError):
        return {"type": "error", "error": "InvalidLocation", "message": "lat/lon required"}

    result = session.track(location)
    if result is None:
        return {"type": "position", "segment_index": None}
    return {
        "type": "position",
        "segment_index": result.segment_index,
        "snapped": list(result.snapped),
        "distance_m": result.distance_m,
        "progress": result.progress,
    }


@router.websocket("/ws/track")
async def track_ws(websocket: WebSocket) -> None:
    """Search for a route, then stream the rider's position along it."""
    await websocket.accept()

    if route_search is None:
        await websocket.close(code=1011, reason="Service not ready")
        return

    session = SearchSession(route_search)
    pending: set[asyncio.Task] = set()
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = orjson.loads(raw)
            except orjson.JSONDecodeError:
                await _send(websocket, {"type": "error", "error": "InvalidMessage", "message": "not JSON"})
                continue
            if not isinstance(msg, dict):
                await _send(websocket, {"type": "error", "error": "InvalidMessage", "message": "expected object"})
                continue

            kind = msg.get("type")
            if kind == "search":
                try:
                    req = SearchRequest.model_validate({
                        "from_name": msg.get("from"),
                        "to_name": msg.get("to"),
                        "points_per_segment": msg.get("points_per_segment"),
                    })
                except ValidationError as e:
                    await _send(websocket, {
                        "type": "error", "error": "InvalidMessage",
                        "message": "; ".join(err["msg"] for err in e.errors()),
                    })
                    continue
                # Searches run alongside incoming messages
                task = asyncio.create_task(_run_search(websocket, session, req))
                pending.add(task)
                task.add_done_callback(pending.discard)
            elif kind == "location":
                await _send(websocket, _position_payload(session, msg))
            else:
                await _send(websocket, {"type": "error", "error": "InvalidMessage", "message": f"unknown type {kind!r}"})
    except WebSocketDisconnect:
        pass
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.exception("WebSocket error")
    finally:
        for task in pending:
            task.cancel()
