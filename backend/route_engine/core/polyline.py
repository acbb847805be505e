"""Encoded polyline codec (the directions provider's compact path format).

Each coordinate is stored as a signed delta from the previous point, scaled
by 1e5, zig-zag encoded and split into 5-bit groups. Every group except the
last has the 0x20 continuation bit set, and each group is offset by 63 into
printable ASCII.
"""

from route_engine.core.errors import PolylineError
from route_engine.core.network import LatLng

PRECISION = 1e5
_OFFSET = 63
_CHUNK_MASK = 0x1F
_CONTINUATION = 0x20


def _read_value(encoded: str, index: int) -> tuple[int, int]:
    """Read one zig-zag varint starting at index. Returns (value, next_index)."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise PolylineError(f"Polyline truncated at offset {index}")
        byte = ord(encoded[index]) - _OFFSET
        if byte < 0 or byte > 0x3F:
            raise PolylineError(f"Invalid polyline character {encoded[index]!r} at offset {index}")
        index += 1
        result |= (byte & _CHUNK_MASK) << shift
        shift += 5
        if byte < _CONTINUATION:
            break
    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode(encoded: str) -> list[LatLng]:
    """Decode a polyline string into [(lat, lng), ...]."""
    coords: list[LatLng] = []
    index = 0
    lat = 0
    lng = 0
    while index < len(encoded):
        dlat, index = _read_value(encoded, index)
        dlng, index = _read_value(encoded, index)
        lat += dlat
        lng += dlng
        coords.append((lat / PRECISION, lng / PRECISION))
    return coords


def _write_value(value: int, out: list[str]) -> None:
    value = ~(value << 1) if value < 0 else value << 1
    while value >= _CONTINUATION:
        out.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _OFFSET))
        value >>= 5
    out.append(chr(value + _OFFSET))


def encode(coords: list[LatLng]) -> str:
    """Encode [(lat, lng), ...] into a polyline string."""
    out: list[str] = []
    prev_lat = 0
    prev_lng = 0
    for lat, lng in coords:
        lat_i = int(round(lat * PRECISION))
        lng_i = int(round(lng * PRECISION))
        _write_value(lat_i - prev_lat, out)
        _write_value(lng_i - prev_lng, out)
        prev_lat, prev_lng = lat_i, lng_i
    return "".join(out)
