"""
Lightcone Simulation Configuration
==================================
Configuration dataclasses for the headless arena and its presets.
All values are in natural units (c = 1, seconds of proper time).
"""

from dataclasses import dataclass, field
from typing import Optional
from enum import Enum

from .contracts import ConfigError
from .mechanics import IntegrationScheme
from .worldline import DEFAULT_CAPACITY


class Scenario(Enum):
    """Preset arenas"""
    DUEL = "duel"      # two agents, one thrusting toward the other
    CHASE = "chase"    # every agent thrusts along +x
    SWARM = "swarm"    # agents on a ring, random thrust directions


@dataclass
class WorldLineConfig:
    """World line history configuration"""
    capacity: int = DEFAULT_CAPACITY  # samples kept per agent
    interpolate: bool = False  # interpolate at the light-cone crossing


@dataclass
class IntegratorConfig:
    """Proper-time integration"""
    dtau: float = 0.016  # ~one frame at 60 Hz
    scheme: IntegrationScheme = IntegrationScheme.EULER


@dataclass
class ControlConfig:
    """Thrust / drag control law standing in for the input layer"""
    thrust: float = 0.4  # proper acceleration magnitude (c per second)
    friction: float = 0.5  # linear drag coefficient on u


@dataclass
class SimulationConfig:
    """Master configuration combining all subsystems"""
    # Arena
    scenario: Scenario = Scenario.DUEL
    n_agents: int = 2
    spawn_radius: float = 5.0  # ring radius at spawn
    n_steps: int = 600
    seed: Optional[int] = None

    # Subsystems
    world_line: WorldLineConfig = field(default_factory=WorldLineConfig)
    integrator: IntegratorConfig = field(default_factory=IntegratorConfig)
    control: ControlConfig = field(default_factory=ControlConfig)
    causality_guard: bool = True

    # Output
    log_level: str = "INFO"
    output_path: Optional[str] = None

    def validate(self):
        """Validate configuration consistency"""
        if self.n_agents < 1:
            raise ConfigError("Must have at least one agent")
        if self.n_steps < 0:
            raise ConfigError(f"n_steps must be non-negative, got {self.n_steps}")
        if self.spawn_radius < 0:
            raise ConfigError(f"spawn_radius must be non-negative, got {self.spawn_radius}")
        if self.world_line.capacity < 1:
            raise ConfigError(f"World line capacity must be at least 1, got {self.world_line.capacity}")
        if self.integrator.dtau < 0:
            raise ConfigError(f"dtau must be non-negative, got {self.integrator.dtau}")
        if self.control.friction < 0:
            raise ConfigError(f"friction must be non-negative, got {self.control.friction}")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Unknown log level: {self.log_level}")
        return True


def create_default_config() -> SimulationConfig:
    """Create default configuration"""
    return SimulationConfig()


def create_small_test_config() -> SimulationConfig:
    """Create small configuration for testing"""
    config = SimulationConfig()
    config.n_steps = 50
    config.world_line.capacity = 64
    config.integrator.dtau = 0.1
    config.seed = 0
    return config


def create_benchmark_config(scenario: str = "duel") -> SimulationConfig:
    """
    Create configuration for a preset scenario.

    Args:
        scenario: One of "duel", "chase", "swarm"

    Returns:
        SimulationConfig for the scenario
    """
    config = create_default_config()
    config.scenario = Scenario(scenario)

    if config.scenario is Scenario.DUEL:
        config.n_agents = 2
        config.spawn_radius = 2.0

    elif config.scenario is Scenario.CHASE:
        config.n_agents = 3
        config.spawn_radius = 5.0
        config.control.friction = 0.0
        config.n_steps = 1200

    elif config.scenario is Scenario.SWARM:
        config.n_agents = 8
        config.spawn_radius = 20.0
        config.control.thrust = 0.8
        config.world_line.capacity = 2000

    return config
