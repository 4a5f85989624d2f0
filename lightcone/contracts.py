"""
Lightcone Architectural Contracts
=================================
Interface contracts between the kinematics core and its collaborators.

The core is a pure physics engine. It does not render, it does not read
input devices and it does not own a transport. Those collaborators talk to
it through the shapes defined here:

- The input layer hands in a proper acceleration (AccelerationSource)
- The network layer exchanges PhaseSpaceMessage dictionaries
- Everything that goes wrong at those edges raises a LightconeError
"""

from typing import TypedDict, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from .vector import Vector3
    from .mechanics import PhaseSpace


# =============================================================================
# WIRE CONTRACT - The only message the core understands
# =============================================================================

class PositionPayload(TypedDict):
    """Spacetime position in the shared world frame"""
    t: float
    x: float
    y: float
    z: float


class VelocityPayload(TypedDict):
    """Proper velocity (spatial part of the 4-velocity), NOT dx/dt"""
    x: float
    y: float
    z: float


class PhaseSpaceMessage(TypedDict):
    """
    STRICT INTERFACE: one agent's state as broadcast by the network layer.

    {"type": "phaseSpace", "position": {t,x,y,z}, "velocity": {x,y,z}}

    The core assumes a plausibly time-ordered stream per sender. It does
    not deduplicate, reorder or reconcile.
    """
    type: str
    position: PositionPayload
    velocity: VelocityPayload


# =============================================================================
# PROTOCOL DEFINITIONS - Collaborator interfaces
# =============================================================================

class AccelerationSource(Protocol):
    """
    Protocol for the input layer.

    Produces the proper acceleration an agent feels this tick, expressed in
    its instantaneous rest frame.
    """
    def acceleration(self, agent_id: str, phase_space: 'PhaseSpace') -> 'Vector3':
        """Proper acceleration for this tick."""
        ...


class PhaseSpaceSink(Protocol):
    """
    Protocol for anything that publishes committed states (network layer).
    """
    def publish(self, agent_id: str, message: PhaseSpaceMessage) -> None:
        """Publish one encoded state. Must not mutate core state."""
        ...


# =============================================================================
# ERRORS
# =============================================================================

class LightconeError(Exception):
    """Base class for errors raised at the edges of the core."""
    pass


class SuperluminalVelocityError(LightconeError, ValueError):
    """Raised when an ordinary velocity at or above c is converted."""
    pass


class ProtocolError(LightconeError, ValueError):
    """Raised when an incoming message does not match PhaseSpaceMessage."""
    pass


class ConfigError(LightconeError, ValueError):
    """Raised when a SimulationConfig is inconsistent."""
    pass
