"""Harvesting demo: one collection point, a small fleet, a ring of resources.

Usage:
    python harvest_demo.py                  # 60 simulated seconds, as fast as possible
    python harvest_demo.py --realtime       # paced by asyncio.sleep
    python harvest_demo.py --seconds 120 --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import math

from harvester import Simulation, SimulationConfig, WorkerState


def ring(radius: float, count: int, phase: float = 0.0) -> list[tuple[float, float, float]]:
    """Evenly spaced points on a horizontal circle around the origin."""
    step = 2 * math.pi / count
    return [
        (radius * math.cos(phase + i * step), 0.0, radius * math.sin(phase + i * step))
        for i in range(count)
    ]


def report(sim: Simulation) -> None:
    busy = sum(1 for w in sim.workers() if w.state is not WorkerState.IDLE)
    print(
        f"t={sim.time:6.1f}s  delivered={sim.delivered:3d}  "
        f"workers={len(sim.workers())} ({busy} busy)  resources={len(sim.resources())}"
    )


async def main_async(seconds: float, dt: float, realtime: bool, seed: int) -> None:
    sim = Simulation(
        SimulationConfig(),
        worker_spawn_points=ring(3.0, 5),
        resource_spawn_points=ring(18.0, 8, phase=0.3) + ring(32.0, 6),
        seed=seed,
    )
    with sim:
        elapsed = 0.0
        while elapsed < seconds:
            chunk = min(5.0, seconds - elapsed)
            await sim.run_async(chunk, dt, realtime=realtime)
            elapsed += chunk
            report(sim)
    print(f"Done. {sim.counter.text} resources delivered.")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seconds", type=float, default=60.0)
    parser.add_argument("--dt", type=float, default=0.02)
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--realtime", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(main_async(args.seconds, args.dt, args.realtime, args.seed))


if __name__ == "__main__":
    main()
