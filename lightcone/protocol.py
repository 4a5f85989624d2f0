"""
Lightcone Wire Protocol
=======================
Encoding of PhaseSpace updates for the network layer.

Only the payload shape lives here; the transport (peer connections,
relays, framing) belongs to the application. Messages are plain dicts so
they can be handed to any JSON transport:

    {"type": "phaseSpace",
     "position": {"t": ..., "x": ..., "y": ..., "z": ...},
     "velocity": {"x": ..., "y": ..., "z": ...}}

Older clients sent the coordinate time as a top-level "coordinateTime"
field and a 3-component position; decode_phase_space() accepts both.
"""

import json
import math
from enum import Enum
from typing import Any, Mapping

from .contracts import PhaseSpaceMessage, ProtocolError
from .vector import Vector3, Vector4
from .mechanics import PhaseSpace


class MessageType(Enum):
    """Message types the core knows how to decode"""
    PHASE_SPACE = "phaseSpace"


def encode_phase_space(ps: PhaseSpace) -> PhaseSpaceMessage:
    """PhaseSpace -> wire dict"""
    return {
        "type": MessageType.PHASE_SPACE.value,
        "position": {
            "t": ps.pos.t,
            "x": ps.pos.x,
            "y": ps.pos.y,
            "z": ps.pos.z,
        },
        "velocity": {
            "x": ps.u.x,
            "y": ps.u.y,
            "z": ps.u.z,
        },
    }


def _component(payload: Mapping[str, Any], key: str, where: str) -> float:
    """Fetch one finite numeric component"""
    if key not in payload:
        raise ProtocolError(f"Missing '{key}' in {where}")
    value = payload[key]
    # bool is an int subclass but never a valid coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProtocolError(f"Component {where}.{key} is not a number: {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ProtocolError(f"Component {where}.{key} is not finite: {value}")
    return value


def decode_phase_space(message: Mapping[str, Any]) -> PhaseSpace:
    """
    Wire dict -> fresh PhaseSpace.

    Raises:
        ProtocolError: wrong message type, missing or non-numeric fields
    """
    if not isinstance(message, Mapping):
        raise ProtocolError(f"Message must be a mapping, got {type(message).__name__}")

    msg_type = message.get("type")
    if msg_type != MessageType.PHASE_SPACE.value:
        raise ProtocolError(f"Unexpected message type: {msg_type!r}")

    position = message.get("position")
    velocity = message.get("velocity")
    if not isinstance(position, Mapping):
        raise ProtocolError("Message has no 'position' object")
    if not isinstance(velocity, Mapping):
        raise ProtocolError("Message has no 'velocity' object")

    if "t" in position:
        t = _component(position, "t", "position")
    else:
        t = _component(message, "coordinateTime", "message")

    pos = Vector4(
        t,
        _component(position, "x", "position"),
        _component(position, "y", "position"),
        _component(position, "z", "position"),
    )
    u = Vector3(
        _component(velocity, "x", "velocity"),
        _component(velocity, "y", "velocity"),
        _component(velocity, "z", "velocity"),
    )
    return PhaseSpace(pos, u)


def dumps(ps: PhaseSpace) -> str:
    """PhaseSpace -> JSON text"""
    return json.dumps(encode_phase_space(ps))


def loads(data: str) -> PhaseSpace:
    """JSON text -> PhaseSpace"""
    try:
        message = json.loads(data)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Invalid JSON: {e}") from e
    return decode_phase_space(message)
