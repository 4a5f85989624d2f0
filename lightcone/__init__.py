"""
Lightcone
=========
Relativistic kinematics for multiple agents in flat Minkowski spacetime.

Every agent moves under its own proper acceleration; what one agent sees
of another is not the other's current state but the event on its world
line whose light is arriving right now.

Modules:
--------
- vector: 3-vectors, 4-vectors, Minkowski product, gamma
- lorentz: Boost matrices from proper velocity
- mechanics: PhaseSpace and proper-time evolution
- worldline: Bounded history and past-light-cone intersection
- causality: Causality guard predicate
- protocol: phaseSpace wire message codec
- contracts: Collaborator interfaces and error types
- config: Configuration dataclasses and presets
- simulation: Headless multi-agent arena
- main: CLI and simulation runner

Example Usage:
--------------
>>> from lightcone import spawn, evolve, WorldLine, Vector3, Vector4
>>> ps = spawn(10.0, 0.0)
>>> wl = WorldLine()
>>> wl.append(ps)
>>> ps = evolve(ps, Vector3(0.1, 0.0, 0.0), dtau=0.016)
>>> wl.append(ps)
>>> seen = wl.past_light_cone_intersection(Vector4(12.0, 0.0, 0.0, 0.0))
"""

__version__ = "1.0.0"

from .contracts import (
    PhaseSpaceMessage,
    AccelerationSource,
    PhaseSpaceSink,
    LightconeError,
    SuperluminalVelocityError,
    ProtocolError,
    ConfigError,
)

from .vector import (
    Vector3,
    Vector4,
    IntervalType,
    minkowski_dot,
    interval_type,
    gamma,
    four_velocity,
    ordinary_velocity,
    proper_velocity,
    lorentz_contraction,
)

from .lorentz import (
    identity,
    build_boost,
    inverse_boost,
    apply,
    compose,
    transpose,
    is_lorentz,
    to_rest_frame,
)

from .mechanics import (
    PhaseSpace,
    IntegrationScheme,
    spawn,
    evolve,
)

from .worldline import (
    WorldLine,
    lightlike_intersection_param,
    interpolate_phase_space,
)

from .causality import (
    is_motion_allowed,
    find_violation,
)

from .protocol import (
    MessageType,
    encode_phase_space,
    decode_phase_space,
)

from .config import (
    SimulationConfig,
    WorldLineConfig,
    IntegratorConfig,
    ControlConfig,
    Scenario,
    create_default_config,
    create_small_test_config,
    create_benchmark_config,
)

from .simulation import (
    Agent,
    Arena,
    TickReport,
    ScenarioController,
    drive,
)

__all__ = [
    "__version__",

    # Contracts
    "PhaseSpaceMessage",
    "AccelerationSource",
    "PhaseSpaceSink",
    "LightconeError",
    "SuperluminalVelocityError",
    "ProtocolError",
    "ConfigError",

    # Vectors
    "Vector3",
    "Vector4",
    "IntervalType",
    "minkowski_dot",
    "interval_type",
    "gamma",
    "four_velocity",
    "ordinary_velocity",
    "proper_velocity",
    "lorentz_contraction",

    # Lorentz
    "identity",
    "build_boost",
    "inverse_boost",
    "apply",
    "compose",
    "transpose",
    "is_lorentz",
    "to_rest_frame",

    # Mechanics
    "PhaseSpace",
    "IntegrationScheme",
    "spawn",
    "evolve",

    # World lines
    "WorldLine",
    "lightlike_intersection_param",
    "interpolate_phase_space",

    # Causality
    "is_motion_allowed",
    "find_violation",

    # Protocol
    "MessageType",
    "encode_phase_space",
    "decode_phase_space",

    # Configuration
    "SimulationConfig",
    "WorldLineConfig",
    "IntegratorConfig",
    "ControlConfig",
    "Scenario",
    "create_default_config",
    "create_small_test_config",
    "create_benchmark_config",

    # Simulation
    "Agent",
    "Arena",
    "TickReport",
    "ScenarioController",
    "drive",
]
