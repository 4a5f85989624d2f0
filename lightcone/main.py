"""
Lightcone Main Simulation Runner
================================
Entry point for running headless arena simulations.

Provides:
- CLI interface
- Logging setup
- Benchmark scenarios
- Results summary and JSON export
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
from tqdm import tqdm

from .config import SimulationConfig, create_benchmark_config
from .mechanics import IntegrationScheme
from .simulation import Arena, ScenarioController, drive

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Centralized logging for CLI runs"""
    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def run_simulation(
    config: Optional[SimulationConfig] = None,
    n_steps: Optional[int] = None,
    progress: bool = False,
) -> Dict[str, Any]:
    """
    Run an arena with the scenario's control law.

    Args:
        config: Simulation configuration
        n_steps: Number of ticks (defaults to config.n_steps)
        progress: Show a tqdm progress bar

    Returns:
        Simulation results dictionary
    """
    if config is None:
        config = create_benchmark_config()
    config.validate()
    if n_steps is None:
        n_steps = config.n_steps

    arena = Arena(config)
    arena.populate()
    controller = ScenarioController(arena)
    observer_id = next(iter(arena.agents))

    results = {
        "scenario": config.scenario.value,
        "steps": [],
        "moved": [],
        "blocked": [],
        "mean_gamma": [],
        "coordinate_time_spread": [],
        "visible_fraction": [],
    }

    logger.info(f"Starting simulation: {config.scenario.value}, "
                f"{config.n_agents} agents, {n_steps} steps")

    for step in tqdm(range(n_steps), disable=not progress, desc="Simulating"):
        report = drive(arena, controller)
        stats = arena.statistics()
        visible = arena.observe(observer_id)

        results["steps"].append(step)
        results["moved"].append(len(report.moved))
        results["blocked"].append(len(report.blocked))
        results["mean_gamma"].append(stats["mean_gamma"])
        results["coordinate_time_spread"].append(
            stats["max_coordinate_time"] - stats["min_coordinate_time"]
        )
        results["visible_fraction"].append(
            float(np.mean([v is not None for v in visible.values()])) if visible else 0.0
        )

    final_stats = arena.statistics()
    results["final_stats"] = final_stats
    results["light_delay"] = arena.light_delay(observer_id)
    results["final_states"] = {
        agent_id: {
            "t": agent.phase_space.pos.t,
            "x": agent.phase_space.pos.x,
            "y": agent.phase_space.pos.y,
            "z": agent.phase_space.pos.z,
            "gamma": agent.phase_space.gamma,
            "samples": len(agent.world_line),
            "moves": agent.n_moves,
            "blocked": agent.n_blocked,
        }
        for agent_id, agent in arena.agents.items()
    }

    if final_stats["total_blocked"]:
        logger.info(f"Causality guard held agents {final_stats['total_blocked']} times")
    logger.info("Simulation complete")
    return results


def save_results(results: Dict[str, Any], output_path: str):
    """Write results as JSON"""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(results, f, indent=2)
    logger.info(f"Results saved to {path}")


def print_config_summary(config: SimulationConfig):
    """Print a summary of the configuration"""
    print("\n" + "="*60)
    print("Lightcone Configuration Summary")
    print("="*60)
    print(f"Scenario: {config.scenario.value}")
    print(f"Number of agents: {config.n_agents}")
    print(f"Spawn radius: {config.spawn_radius}")
    print(f"Proper-time step: {config.integrator.dtau} ({config.integrator.scheme.value})")
    print()
    print("World lines:")
    print(f"  - Capacity: {config.world_line.capacity}")
    print(f"  - Interpolate at crossing: {config.world_line.interpolate}")
    print()
    print("Control:")
    print(f"  - Thrust: {config.control.thrust}")
    print(f"  - Friction: {config.control.friction}")
    print(f"  - Causality guard: {config.causality_guard}")
    print("="*60 + "\n")


def main(argv=None):
    """CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Lightcone relativistic multi-agent simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Two agents, one chasing what it sees of the other
  python -m lightcone.main --scenario duel

  # Swarm with interpolated light-cone crossings, results to JSON
  python -m lightcone.main --scenario swarm --interpolate --output out/swarm.json
        """
    )

    parser.add_argument(
        "--scenario",
        choices=["duel", "chase", "swarm"],
        default="duel",
        help="Preset scenario"
    )
    parser.add_argument("--n-agents", type=int, help="Number of agents")
    parser.add_argument("--steps", type=int, help="Simulation ticks")
    parser.add_argument("--dtau", type=float, help="Proper-time step per tick")
    parser.add_argument("--capacity", type=int, help="World line capacity")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--midpoint", action="store_true",
                        help="Average old/new 4-velocity in the position update")
    parser.add_argument("--interpolate", action="store_true",
                        help="Interpolate the visible state at the light-cone crossing")
    parser.add_argument("--no-guard", action="store_true", help="Disable the causality guard")
    parser.add_argument("--output", type=str, help="Output path for results JSON")
    parser.add_argument("--log-file", type=str, help="Also log to this file")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args(argv)

    # Create config
    config = create_benchmark_config(args.scenario)

    # Apply overrides
    if args.n_agents:
        config.n_agents = args.n_agents
    if args.steps is not None:
        config.n_steps = args.steps
    if args.dtau is not None:
        config.integrator.dtau = args.dtau
    if args.capacity:
        config.world_line.capacity = args.capacity
    if args.seed is not None:
        config.seed = args.seed
    if args.midpoint:
        config.integrator.scheme = IntegrationScheme.MIDPOINT
    if args.interpolate:
        config.world_line.interpolate = True
    if args.no_guard:
        config.causality_guard = False
    config.log_level = args.log_level
    config.output_path = args.output

    setup_logging(config.log_level, args.log_file)
    config.validate()
    print_config_summary(config)

    results = run_simulation(config, progress=True)

    stats = results["final_stats"]
    print(f"\nSimulation complete!")
    print(f"Ticks: {stats['tick']}")
    print(f"Mean gamma: {stats['mean_gamma']:.4f} (max {stats['max_gamma']:.4f})")
    print(f"Coordinate time: {stats['min_coordinate_time']:.3f} .. {stats['max_coordinate_time']:.3f}")
    print(f"Guard holds: {stats['total_blocked']}")
    for agent_id, delay in results["light_delay"].items():
        seen = "not yet visible" if delay is None else f"seen {delay:.3f} late"
        print(f"  {agent_id}: {seen}")

    if args.output:
        save_results(results, args.output)


if __name__ == "__main__":
    main()
