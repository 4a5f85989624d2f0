"""
Lightcone Relativistic Mechanics
================================
Phase space (4-position + proper velocity) and its proper-time evolution.

Equation of motion, integrated in proper time tau:
- du/dtau = spatial part of the world-frame 4-acceleration
- dx/dtau = (gamma(u), u)

The applied acceleration is the one the agent itself feels, i.e. it is
given in the instantaneous rest frame and boosted to the world frame
before integrating.
"""

from dataclasses import dataclass
from enum import Enum

from .vector import Vector3, Vector4, gamma, four_velocity, ordinary_velocity
from .lorentz import inverse_boost, apply


class IntegrationScheme(Enum):
    """Position update rule used by evolve()"""
    EULER = "euler"        # new 4-velocity only
    MIDPOINT = "midpoint"  # average of old and new 4-velocity


@dataclass(frozen=True)
class PhaseSpace:
    """
    Instantaneous state of one agent.

    pos: spacetime position in the shared world frame
    u:   proper velocity (spatial part of the 4-velocity)
    """
    pos: Vector4
    u: Vector3

    @property
    def gamma(self) -> float:
        return gamma(self.u)

    @property
    def four_velocity(self) -> Vector4:
        return four_velocity(self.u)

    @property
    def velocity(self) -> Vector3:
        """Ordinary velocity dx/dt"""
        return ordinary_velocity(self.u)


def spawn(x: float, y: float, z: float = 0.0, t: float = 0.0) -> PhaseSpace:
    """Phase space of a newly spawned agent: given position, at rest"""
    return PhaseSpace(Vector4(t, x, y, z), Vector3.zero())


def evolve(ps: PhaseSpace,
           proper_acceleration: Vector3,
           dtau: float,
           scheme: IntegrationScheme = IntegrationScheme.EULER) -> PhaseSpace:
    """
    Advance a phase space by one proper-time step.

    Args:
        ps: Current state
        proper_acceleration: Acceleration felt in the rest frame
        dtau: Proper-time step (>= 0)
        scheme: Position update rule

    Returns:
        New PhaseSpace. dtau == 0 returns ps unchanged.
    """
    if dtau < 0:
        raise ValueError(f"Proper-time step must be non-negative, got {dtau}")
    if dtau == 0:
        return ps

    # Rest-frame 4-acceleration has no time component
    accel_rest = Vector4(0.0, proper_acceleration.x,
                         proper_acceleration.y, proper_acceleration.z)
    accel_world = apply(inverse_boost(ps.u), accel_rest)

    new_u = ps.u.add(accel_world.spatial().scale(dtau))

    velocity4 = four_velocity(new_u)
    if scheme is IntegrationScheme.MIDPOINT:
        velocity4 = velocity4.add(four_velocity(ps.u)).scale(0.5)
    new_pos = ps.pos.add(velocity4.scale(dtau))

    return PhaseSpace(new_pos, new_u)
