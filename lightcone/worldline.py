"""
Lightcone World Lines
=====================
Bounded history of PhaseSpace samples and the past-light-cone query.

A world line is one agent's trajectory, discretized as the phase spaces it
committed tick by tick (oldest -> newest, non-decreasing pos.t). Other
agents never see its latest sample: they see the sample whose light is
arriving at them right now, found by intersecting the observer's past
light cone with the polyline through the history.

Segment solve, for X(lam) = p1 + lam * (p2 - p1), lam in [0, 1]:

    <obs - X, obs - X> = 0   ->   a lam^2 - 2 b lam + c = 0
    a = <d, d>,  b = <d, x0>,  c = <x0, x0>,  d = p2 - p1,  x0 = obs - p1
    lam = (b + sqrt(b^2 - a c)) / a          (past-cone branch)

No tolerance is applied to the discriminant or to the [0, 1] bounds, so
events sitting exactly on the cone can flip between hit and miss under
rounding.
"""

import logging
import math
from collections import deque
from typing import Iterator, List, Optional

from .vector import Vector4
from .mechanics import PhaseSpace

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000


def lightlike_intersection_param(pos1: Vector4, pos2: Vector4,
                                 observer_pos: Vector4) -> Optional[float]:
    """
    Segment parameter where p1 -> p2 crosses the observer's past light cone.

    Returns None when the segment has no real crossing. The result is not
    clipped to [0, 1]; callers check the range.
    """
    d = pos2.sub(pos1)
    x0 = observer_pos.sub(pos1)

    a = d.minkowski_dot(d)
    b = d.minkowski_dot(x0)
    c = x0.minkowski_dot(x0)

    if a == 0:
        # Degenerate (repeated sample or lightlike segment): -2 b lam + c = 0
        if b == 0:
            return None
        return c / (2.0 * b)

    discriminant = b * b - a * c
    if discriminant < 0:
        return None
    return (b + math.sqrt(discriminant)) / a


def _latest_index(history: List[PhaseSpace], t: float) -> int:
    """Binary search over a list snapshot, -1 if every sample is later than t"""
    if not history or history[0].pos.t > t:
        return -1
    if history[-1].pos.t <= t:
        return len(history) - 1

    # Invariant: history[left].t <= t < history[right].t
    left, right = 0, len(history) - 1
    while right - left > 1:
        mid = (left + right) // 2
        if history[mid].pos.t <= t:
            left = mid
        else:
            right = mid
    return left


def interpolate_phase_space(start: PhaseSpace, end: PhaseSpace, lam: float) -> PhaseSpace:
    """Linear interpolation of position and proper velocity"""
    pos = start.pos.add(end.pos.sub(start.pos).scale(lam))
    u = start.u.add(end.u.sub(start.u).scale(lam))
    return PhaseSpace(pos, u)


class WorldLine:
    """
    Bounded, time-ordered PhaseSpace history.

    Only the owning agent appends; everyone else reads through
    past_light_cone_intersection().
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"WorldLine capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._history: deque = deque(maxlen=capacity)

    def append(self, phase_space: PhaseSpace):
        """Record a sample, evicting the oldest one beyond capacity"""
        if self._history and phase_space.pos.t < self._history[-1].pos.t:
            logger.debug(
                f"Out-of-order sample appended: t={phase_space.pos.t} "
                f"after t={self._history[-1].pos.t}"
            )
        self._history.append(phase_space)

    def clear(self):
        self._history.clear()

    @property
    def history(self) -> List[PhaseSpace]:
        """Snapshot of the samples, oldest first"""
        return list(self._history)

    @property
    def current(self) -> Optional[PhaseSpace]:
        """Latest sample, or None for an empty world line"""
        if not self._history:
            return None
        return self._history[-1]

    def __len__(self) -> int:
        return len(self._history)

    def __iter__(self) -> Iterator[PhaseSpace]:
        return iter(self._history)

    def __getitem__(self, index: int) -> PhaseSpace:
        return self._history[index]

    def latest_index_at_or_before(self, t: float) -> int:
        """
        Latest index k with history[k].pos.t <= t, or -1 if every sample
        is later than t.
        """
        return _latest_index(self.history, t)

    def past_light_cone_intersection(self, observer_pos: Vector4,
                                     interpolate: bool = False) -> Optional[PhaseSpace]:
        """
        The sample on this world line that the observer sees right now.

        Walks segments from the newest one at (or just after) the observer's
        time back to the oldest and stops at the first segment that crosses
        the observer's past light cone.

        Cost: one linear copy of the history into a list, O(log n) search
        on that list, then an O(n) worst-case backward scan.

        Args:
            observer_pos: Observer's spacetime position
            interpolate: Return the interpolated state at the crossing
                instead of the older endpoint of the segment

        Returns:
            Visible PhaseSpace, or None if no signal from this world line
            has reached the observer yet.
        """
        # deque indexing is O(n) away from the ends; search a list snapshot
        history = self.history
        last_past = _latest_index(history, observer_pos.t)
        if last_past < 0:
            return None

        if len(history) == 1:
            # No segment to search; the lone sample is visible only when it
            # sits exactly on the past cone.
            sep = observer_pos.sub(history[0].pos)
            if sep.t >= 0 and sep.interval_squared() == 0:
                return history[0]
            return None

        # One sample past the observer's time covers the boundary segment
        start = min(last_past + 1, len(history) - 1)
        for i in range(start, 0, -1):
            prev = history[i - 1]
            curr = history[i]

            # Both endpoints in the observer's future
            if observer_pos.t - prev.pos.t <= 0 and observer_pos.t - curr.pos.t <= 0:
                continue

            lam = lightlike_intersection_param(prev.pos, curr.pos, observer_pos)
            if lam is None or not 0.0 <= lam <= 1.0:
                continue

            if interpolate:
                return interpolate_phase_space(prev, curr, lam)
            return prev

        return None
