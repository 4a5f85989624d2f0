"""
Unit tests for lightcone/simulation.py and lightcone/main.py

Tests the arena tick, the causality guard wiring, remote updates,
observation and the scenario runner.
"""

import json

import pytest
from lightcone.vector import Vector3, Vector4
from lightcone.mechanics import PhaseSpace
from lightcone.config import Scenario, create_benchmark_config
from lightcone.protocol import encode_phase_space
from lightcone.simulation import Arena, ScenarioController, drive, agent_color
from lightcone.main import run_simulation, save_results, main


class RecordingSink:
    """Collects published messages"""

    def __init__(self):
        self.published = []

    def publish(self, agent_id, message):
        self.published.append((agent_id, message))


class ZeroThrust:
    """Acceleration source that never pushes"""

    def acceleration(self, agent_id, phase_space):
        return Vector3.zero()


def _still(arena):
    return {agent_id: Vector3.zero() for agent_id in arena.agents}


class TestArenaLifecycle:
    """Tests for spawn / populate / remove"""

    def test_populate_ring(self, arena):
        """Two agents on a ring of radius 2, at rest, one sample each"""
        assert sorted(arena.agents) == ["agent_0", "agent_1"]
        a0 = arena.agents["agent_0"]
        a1 = arena.agents["agent_1"]
        assert a0.phase_space.pos.x == pytest.approx(2.0)
        assert a1.phase_space.pos.x == pytest.approx(-2.0)
        assert a0.phase_space.u == Vector3.zero()
        assert len(a0.world_line) == 1
        assert a0.color != a1.color

    def test_single_agent_at_origin(self, small_config):
        small_config.n_agents = 1
        arena = Arena(small_config)
        arena.populate()
        assert arena.agents["agent_0"].phase_space.pos == Vector4.zero()

    def test_duplicate_spawn(self, arena):
        with pytest.raises(ValueError):
            arena.spawn("agent_0", 0.0, 0.0)

    def test_remove(self, arena):
        arena.remove("agent_1")
        assert list(arena.agents) == ["agent_0"]

    def test_agent_color(self):
        assert agent_color(0, 4) == "hsl(0, 70%, 60%)"
        assert agent_color(2, 4) == "hsl(180, 70%, 60%)"

    def test_statistics_empty(self, small_config):
        assert Arena(small_config).statistics() == {"n_agents": 0}


class TestArenaStep:
    """Tests for Arena.step"""

    def test_far_apart_agents_move(self, arena):
        """Spacelike-separated agents at rest both advance"""
        report = arena.step(_still(arena), dtau=0.1)
        assert sorted(report.moved) == ["agent_0", "agent_1"]
        assert report.blocked == []
        for agent in arena.agents.values():
            assert agent.phase_space.pos.t == pytest.approx(0.1)
            assert len(agent.world_line) == 2
        assert arena.tick_count == 1

    def test_guard_holds_agent_ahead_in_time(self, small_config):
        """An agent whose proposal is timelike to an earlier event waits"""
        arena = Arena(small_config)
        arena.spawn("ahead", 0.0, 0.0, t=5.0)
        arena.spawn("behind", 1.0, 0.0, t=0.0)

        report = arena.step(_still(arena), dtau=0.1)

        assert report.blocked == ["ahead"]
        assert report.moved == ["behind"]
        ahead = arena.agents["ahead"]
        assert ahead.phase_space.pos.t == 5.0
        assert len(ahead.world_line) == 1
        assert ahead.n_blocked == 1
        assert arena.agents["behind"].phase_space.pos.t == pytest.approx(0.1)
        assert arena.statistics()["total_blocked"] == 1

    def test_close_pair_keeps_moving(self, small_config):
        """Agents nearer than one step apart are never held"""
        arena = Arena(small_config)
        arena.spawn("a", 0.0, 0.0)
        arena.spawn("b", 0.05, 0.0)
        for _ in range(100):
            report = arena.step(_still(arena), dtau=0.1)
            assert report.blocked == []
        for agent in arena.agents.values():
            assert agent.phase_space.pos.t == pytest.approx(10.0)
            assert agent.n_blocked == 0

    def test_step_longer_than_separation(self, small_config):
        """Agents at rest spawned together may take any forward step"""
        arena = Arena(small_config)
        arena.spawn("a", 0.0, 0.0)
        arena.spawn("b", 4.0, 0.0)
        report = arena.step(_still(arena), dtau=5.0)
        assert report.blocked == []
        assert sorted(report.moved) == ["a", "b"]

    def test_guard_disabled(self, small_config):
        """Without the guard every proposal is committed"""
        small_config.causality_guard = False
        arena = Arena(small_config)
        arena.spawn("ahead", 0.0, 0.0, t=5.0)
        arena.spawn("behind", 1.0, 0.0, t=0.0)
        report = arena.step(_still(arena), dtau=0.1)
        assert report.blocked == []

    def test_sink_publishes_committed_states(self, small_config):
        """Committed local states are handed to the sink as wire messages"""
        sink = RecordingSink()
        arena = Arena(small_config, sink=sink)
        arena.spawn("a", 0.0, 0.0)
        arena.step({"a": Vector3(1.0, 0.0, 0.0)}, dtau=0.1)

        assert len(sink.published) == 1
        agent_id, message = sink.published[0]
        assert agent_id == "a"
        assert message == encode_phase_space(arena.agents["a"].phase_space)

    def test_drive_skips_remote_agents(self, arena):
        """Remote agents are only updated through receive()"""
        arena.receive("peer", encode_phase_space(
            PhaseSpace(Vector4(0.0, 0.0, 50.0, 0.0), Vector3.zero())
        ))
        report = drive(arena, ZeroThrust())
        assert "peer" not in report.moved
        assert sorted(report.moved) == ["agent_0", "agent_1"]


class TestReceive:
    """Tests for Arena.receive"""

    def test_unknown_sender_joins_as_remote(self, arena):
        state = PhaseSpace(Vector4(3.0, 1.0, 2.0, 0.0), Vector3(0.2, 0.0, 0.0))
        received = arena.receive("peer", encode_phase_space(state))

        assert received == state
        peer = arena.agents["peer"]
        assert peer.remote
        assert peer.phase_space == state
        assert peer.world_line.history == [state]

    def test_update_appends(self, arena):
        first = PhaseSpace(Vector4(0.0, 0.0, 9.0, 0.0), Vector3.zero())
        second = PhaseSpace(Vector4(0.5, 0.0, 9.0, 0.0), Vector3.zero())
        arena.receive("peer", encode_phase_space(first))
        arena.receive("peer", encode_phase_space(second))
        peer = arena.agents["peer"]
        assert peer.phase_space == second
        assert len(peer.world_line) == 2

    def test_local_agent_not_overwritten(self, arena):
        """Updates addressed to a locally driven agent are rejected"""
        before = arena.agents["agent_0"].phase_space
        spoofed = PhaseSpace(Vector4(1.0, 100.0, 0.0, 0.0), Vector3.zero())
        with pytest.raises(ValueError):
            arena.receive("agent_0", encode_phase_space(spoofed))
        assert arena.agents["agent_0"].phase_space == before
        assert len(arena.agents["agent_0"].world_line) == 1

    def test_malformed_message(self, arena):
        with pytest.raises(ValueError):
            arena.receive("peer", {"type": "chat", "text": "hi"})
        assert "peer" not in arena.agents


class TestObservation:
    """Tests for observe / light_delay"""

    def test_nothing_visible_at_spawn(self, arena):
        """Light needs time to cross the arena"""
        assert arena.observe("agent_0") == {"agent_1": None}
        assert arena.light_delay("agent_0") == {"agent_1": None}

    def test_visible_after_light_travel_time(self, arena):
        """Agents 4 apart at rest see each other about 4 late"""
        for _ in range(50):
            arena.step(_still(arena), dtau=0.1)

        seen = arena.observe("agent_0")["agent_1"]
        assert seen is not None
        assert seen.pos.x == pytest.approx(-2.0)

        delay = arena.light_delay("agent_1")["agent_0"]
        assert 4.0 - 1e-9 <= delay <= 4.1 + 1e-9


class TestScenarioController:
    """Tests for the thrust/drag control law"""

    def test_chase_pushes_along_x(self, small_config):
        small_config.scenario = Scenario.CHASE
        arena = Arena(small_config)
        arena.populate()
        controller = ScenarioController(arena)
        for _ in range(10):
            drive(arena, controller)
        for agent in arena.agents.values():
            assert agent.phase_space.u.x > 0

    def test_drag_opposes_motion(self, arena):
        """A coasting agent decelerates"""
        controller = ScenarioController(arena)
        ps = PhaseSpace(Vector4.zero(), Vector3(1.0, 0.0, 0.0))
        # agent_1 never thrusts in a duel
        accel = controller.acceleration("agent_1", ps)
        assert accel.x == pytest.approx(-arena.config.control.friction)

    def test_swarm_headings_reproducible(self):
        """Same seed, same headings"""
        accels = []
        for _ in range(2):
            config = create_benchmark_config("swarm")
            config.seed = 7
            arena = Arena(config)
            arena.populate()
            controller = ScenarioController(arena)
            accels.append([
                controller.acceleration(agent_id, agent.phase_space)
                for agent_id, agent in sorted(arena.agents.items())
            ])
        assert accels[0] == accels[1]
        for accel in accels[0]:
            assert accel.length() == pytest.approx(config.control.thrust)

    def test_duel_steers_toward_visible_target(self, arena):
        """agent_0 starts pushing toward agent_1 once it can see it"""
        controller = ScenarioController(arena)
        for _ in range(60):
            drive(arena, controller)
        assert arena.agents["agent_0"].phase_space.u.x < 0
        assert arena.agents["agent_1"].phase_space.u == Vector3.zero()


class TestRunner:
    """Tests for run_simulation / save_results / CLI"""

    def test_run_simulation(self, small_config):
        results = run_simulation(small_config, n_steps=5)
        assert results["scenario"] == "duel"
        for key in ("steps", "moved", "blocked", "mean_gamma",
                    "coordinate_time_spread", "visible_fraction"):
            assert len(results[key]) == 5
        assert results["final_stats"]["tick"] == 5
        assert set(results["final_states"]) == {"agent_0", "agent_1"}

    def test_save_results(self, small_config, tmp_path):
        results = run_simulation(small_config, n_steps=3)
        out = tmp_path / "nested" / "results.json"
        save_results(results, str(out))
        loaded = json.loads(out.read_text())
        assert loaded["final_stats"]["n_agents"] == 2

    def test_cli(self, tmp_path):
        out = tmp_path / "cli.json"
        main(["--scenario", "chase", "--steps", "3", "--seed", "1", "--output", str(out)])
        loaded = json.loads(out.read_text())
        assert loaded["scenario"] == "chase"
        assert len(loaded["steps"]) == 3
