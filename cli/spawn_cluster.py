"""Command-line entry point for spawning a single agent cluster."""

from __future__ import annotations

import argparse
import json
import logging
import random
from typing import List

from crowdspawn.core.cluster import AgentCluster
from crowdspawn.core.constants import AgentType, WaypointMode
from crowdspawn.core.ids import AgentIdAllocator
from crowdspawn.core.scene import Scene
from crowdspawn.core.waypoints import WaitingQueue, Waypoint, WaypointRegistry


def _parse_point(value: str) -> tuple[str, float, float]:
    try:
        name, x, y = value.split(":")
        return name, float(x), float(y)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected NAME:X:Y, got {value!r}") from None


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dissolve an agent cluster and print the spawned agents")
    parser.add_argument("x", type=float, help="Cluster centroid x")
    parser.add_argument("y", type=float, help="Cluster centroid y")
    parser.add_argument("count", type=int, help="Number of agents to spawn")
    parser.add_argument("--width", type=float, default=0.0, help="Distribution footprint width")
    parser.add_argument("--height", type=float, default=0.0, help="Distribution footprint height")
    parser.add_argument("--type", choices=[t.value for t in AgentType], default=AgentType.ADULT.value)
    parser.add_argument("--mode", choices=[m.value for m in WaypointMode], default=WaypointMode.LOOP.value)
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--first-id", type=int, default=0, help="First synthesised agent id")
    parser.add_argument("--waypoint", type=_parse_point, action="append", default=[], help="NAME:X:Y")
    parser.add_argument("--queue", type=_parse_point, action="append", default=[], help="NAME:X:Y")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every spawned agent")
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    """Build the cluster from arguments, dissolve it and dump the agents as JSON."""

    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    registry = WaypointRegistry()
    scene = Scene()
    cluster = AgentCluster(
        args.x,
        args.y,
        args.count,
        id_allocator=AgentIdAllocator(args.first_id),
        rng=random.Random(args.seed),
        scene=scene,
    )
    cluster.set_distribution(args.width, args.height)
    cluster.set_type(AgentType(args.type))
    cluster.set_waypoint_mode(WaypointMode(args.mode))
    for name, x, y in args.waypoint:
        cluster.add_waypoint(registry.add(Waypoint(name, x, y)))
    for name, x, y in args.queue:
        cluster.add_waiting_queue(registry.add(WaitingQueue(name, x, y)))

    agents = cluster.dissolve()
    rows = [
        {
            "index": agent.index,
            "name": agent.name,
            "x": agent.x,
            "y": agent.y,
            "type": agent.agent_type.value,
            "vmax": agent.vmax,
            "waypoints": [w.name for w in agent.waypoints],
        }
        for agent in agents
    ]
    print(json.dumps({"cluster": str(cluster), "agents": rows}, indent=2))


if __name__ == "__main__":
    main()
