"""
Lightcone Arena
===============
Headless multi-agent driver for the kinematics core.

Per tick, for every locally controlled agent:
1. The acceleration source picks a proper acceleration
2. The causality guard checks the agent's current position against a
   snapshot of every other agent's position taken at the start of the tick
3. Allowed agents are evolved and the new phase space is appended to the
   world line; held agents simply wait this tick

Remote agents are fed through receive() with wire messages instead.
Observation answers "what does agent A see of everybody else right now".
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import numpy as np

from .config import SimulationConfig, Scenario, create_default_config
from .contracts import AccelerationSource, PhaseSpaceMessage, PhaseSpaceSink
from .vector import Vector3, Vector4
from .mechanics import PhaseSpace, spawn, evolve
from .worldline import WorldLine
from .causality import find_violation
from .protocol import decode_phase_space, encode_phase_space

logger = logging.getLogger(__name__)


@dataclass
class Agent:
    """One participant: current state, its history and a display colour"""
    id: str
    phase_space: PhaseSpace
    world_line: WorldLine
    color: str = "hsl(0, 70%, 60%)"
    remote: bool = False

    # Statistics
    n_moves: int = 0
    n_blocked: int = 0


@dataclass
class TickReport:
    """Outcome of one Arena.step()"""
    moved: List[str] = field(default_factory=list)
    blocked: List[str] = field(default_factory=list)


def agent_color(index: int, n_agents: int) -> str:
    """Evenly spaced hues, presentation metadata only"""
    hue = int(360 * index / max(n_agents, 1))
    return f"hsl({hue}, 70%, 60%)"


class Arena:
    """
    Collection of agents sharing one world frame.

    The arena owns every agent's PhaseSpace and WorldLine. Only step()
    and receive() write them; observe() is read-only.
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 sink: Optional[PhaseSpaceSink] = None):
        self.config = config if config is not None else create_default_config()
        self.config.validate()
        self.sink = sink
        self.agents: Dict[str, Agent] = {}
        self.tick_count = 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def spawn(self, agent_id: str, x: float, y: float, z: float = 0.0,
              t: float = 0.0, color: Optional[str] = None,
              remote: bool = False) -> Agent:
        """Create an agent at rest and record its first sample"""
        agent = self._add(agent_id, spawn(x, y, z, t), color, remote)
        logger.debug(f"Spawned {agent_id} at ({t}, {x}, {y}, {z})")
        return agent

    def _add(self, agent_id: str, ps: PhaseSpace, color: Optional[str],
             remote: bool) -> Agent:
        if agent_id in self.agents:
            raise ValueError(f"Agent {agent_id} already exists")

        world_line = WorldLine(self.config.world_line.capacity)
        world_line.append(ps)
        agent = Agent(
            id=agent_id,
            phase_space=ps,
            world_line=world_line,
            color=color or agent_color(len(self.agents), self.config.n_agents),
            remote=remote,
        )
        self.agents[agent_id] = agent
        return agent

    def remove(self, agent_id: str) -> Agent:
        """Drop an agent and its history"""
        agent = self.agents.pop(agent_id)
        logger.debug(f"Removed {agent_id} after {len(agent.world_line)} samples")
        return agent

    def populate(self):
        """Spawn config.n_agents local agents on a ring around the origin"""
        n = self.config.n_agents
        radius = self.config.spawn_radius
        for i in range(n):
            if n == 1:
                x, y = 0.0, 0.0
            else:
                angle = 2.0 * math.pi * i / n
                x, y = radius * math.cos(angle), radius * math.sin(angle)
            self.spawn(f"agent_{i}", x, y, color=agent_color(i, n))

    # -------------------------------------------------------------------------
    # Simulation step
    # -------------------------------------------------------------------------

    def positions(self) -> Dict[str, Vector4]:
        """Current spacetime position of every agent"""
        return {agent_id: agent.phase_space.pos for agent_id, agent in self.agents.items()}

    def step(self, accelerations: Mapping[str, Vector3],
             dtau: Optional[float] = None) -> TickReport:
        """
        Advance the given agents by one proper-time step.

        Args:
            accelerations: agent_id -> rest-frame proper acceleration
            dtau: Proper-time step (defaults to config.integrator.dtau)

        Returns:
            TickReport listing moved and blocked agents
        """
        if dtau is None:
            dtau = self.config.integrator.dtau
        scheme = self.config.integrator.scheme

        snapshot = self.positions()
        report = TickReport()

        for agent_id, acceleration in accelerations.items():
            agent = self.agents[agent_id]

            if self.config.causality_guard:
                others = [pos for other_id, pos in snapshot.items() if other_id != agent_id]
                violation = find_violation(agent.phase_space.pos, others)
                if violation is not None:
                    agent.n_blocked += 1
                    report.blocked.append(agent_id)
                    logger.debug(
                        f"Tick {self.tick_count}: {agent_id} held at t={agent.phase_space.pos.t:.3f}, "
                        f"timelike to event {others[violation]}"
                    )
                    continue

            self._commit(agent, evolve(agent.phase_space, acceleration, dtau, scheme))
            report.moved.append(agent_id)

        self.tick_count += 1
        return report

    def _commit(self, agent: Agent, ps: PhaseSpace):
        agent.phase_space = ps
        agent.world_line.append(ps)
        agent.n_moves += 1
        if self.sink is not None and not agent.remote:
            self.sink.publish(agent.id, encode_phase_space(ps))

    def receive(self, agent_id: str, message: PhaseSpaceMessage) -> PhaseSpace:
        """
        Apply a phase space update received from the network layer.

        Unknown senders are spawned as remote agents on first contact.

        Raises:
            ProtocolError: malformed message
            ValueError: agent_id belongs to a locally controlled agent
        """
        ps = decode_phase_space(message)
        agent = self.agents.get(agent_id)
        if agent is None:
            self._add(agent_id, ps, None, remote=True)
            logger.info(f"Remote agent {agent_id} joined at t={ps.pos.t:.3f}")
            return ps
        if not agent.remote:
            raise ValueError(f"Agent {agent_id} is controlled locally")
        agent.phase_space = ps
        agent.world_line.append(ps)
        return ps

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def observe(self, observer_id: str) -> Dict[str, Optional[PhaseSpace]]:
        """
        What the observer sees of every other agent right now.

        None means no light from that agent has reached the observer yet.
        """
        observer_pos = self.agents[observer_id].phase_space.pos
        interpolate = self.config.world_line.interpolate
        return {
            agent_id: agent.world_line.past_light_cone_intersection(observer_pos, interpolate)
            for agent_id, agent in self.agents.items()
            if agent_id != observer_id
        }

    def light_delay(self, observer_id: str) -> Dict[str, Optional[float]]:
        """Coordinate-time lag between the observer and what it sees of each agent"""
        observer_t = self.agents[observer_id].phase_space.pos.t
        return {
            agent_id: (None if visible is None else observer_t - visible.pos.t)
            for agent_id, visible in self.observe(observer_id).items()
        }

    def statistics(self) -> Dict[str, float]:
        """Aggregate arena statistics for logging"""
        if not self.agents:
            return {"n_agents": 0}
        gammas = np.array([a.phase_space.gamma for a in self.agents.values()])
        times = np.array([a.phase_space.pos.t for a in self.agents.values()])
        return {
            "n_agents": len(self.agents),
            "tick": self.tick_count,
            "mean_gamma": float(gammas.mean()),
            "max_gamma": float(gammas.max()),
            "min_coordinate_time": float(times.min()),
            "max_coordinate_time": float(times.max()),
            "total_blocked": int(sum(a.n_blocked for a in self.agents.values())),
        }


class ScenarioController:
    """
    Thrust/drag control law standing in for the input layer.

    acceleration = thrust * direction - friction * u

    DUEL:  agent_0 steers toward where it currently SEES agent_1; others coast
    CHASE: everyone thrusts along +x
    SWARM: each agent holds a random direction in the xy plane
    """

    def __init__(self, arena: Arena, rng: Optional[np.random.Generator] = None):
        self.arena = arena
        self.config = arena.config
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self._headings: Dict[str, Vector3] = {}

    def _heading(self, agent_id: str, ps: PhaseSpace) -> Vector3:
        scenario = self.config.scenario

        if scenario is Scenario.CHASE:
            return Vector3(1.0, 0.0, 0.0)

        if scenario is Scenario.SWARM:
            if agent_id not in self._headings:
                angle = self.rng.uniform(0.0, 2.0 * math.pi)
                self._headings[agent_id] = Vector3(math.cos(angle), math.sin(angle), 0.0)
            return self._headings[agent_id]

        # DUEL
        agent_ids = sorted(self.arena.agents)
        if len(agent_ids) < 2 or agent_id != agent_ids[0]:
            return Vector3.zero()
        target = self.arena.agents[agent_ids[1]]
        visible = target.world_line.past_light_cone_intersection(
            ps.pos, self.config.world_line.interpolate
        )
        if visible is None:
            return Vector3.zero()
        return visible.pos.spatial().sub(ps.pos.spatial()).normalize()

    def acceleration(self, agent_id: str, phase_space: PhaseSpace) -> Vector3:
        heading = self._heading(agent_id, phase_space)
        thrust = heading.scale(self.config.control.thrust)
        drag = phase_space.u.scale(-self.config.control.friction)
        return thrust.add(drag)


def drive(arena: Arena, source: AccelerationSource) -> TickReport:
    """One tick with an arbitrary acceleration source for every local agent"""
    accelerations = {
        agent_id: source.acceleration(agent_id, agent.phase_space)
        for agent_id, agent in arena.agents.items()
        if not agent.remote
    }
    return arena.step(accelerations)
