"""
Lightcone Causality Guard
=========================
Stateless gate evaluated before a motion update is committed.

An agent may not stand where another agent's already-recorded event
(one at or before the agent's own coordinate time) is timelike-separated
from it: that would mean the agent has already "seen" something it should
not be able to see yet. A rejected update is not an error; the caller
skips this tick and retries on the next one.
"""

from typing import Iterable, Optional

from .vector import Vector4


def find_violation(self_pos: Vector4, other_events: Iterable[Vector4]) -> Optional[int]:
    """Index of the first event that blocks the motion, or None"""
    for index, event in enumerate(other_events):
        if event.t > self_pos.t:
            continue
        diff = event.sub(self_pos)
        if diff.minkowski_dot(diff) < 0:
            return index
    return None


def is_motion_allowed(self_pos: Vector4, other_events: Iterable[Vector4]) -> bool:
    """True unless some earlier-or-simultaneous event is timelike-separated"""
    return find_violation(self_pos, other_events) is None
