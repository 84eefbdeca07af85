"""Navigation goals shared between clusters and the agents they spawn."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Protocol, Sequence, Tuple, runtime_checkable

import networkx as nx

from .constants import WaypointMode


@runtime_checkable
class Navigable(Protocol):
    """Anything an agent can be routed towards."""

    name: str

    @property
    def position(self) -> Tuple[float, float]: ...


@dataclass(eq=False)
class Waypoint:
    """A circular navigation target.

    Waypoints compare by identity: two targets at the same spot are still two
    distinct entries in an agent's route.
    """

    name: str
    x: float
    y: float
    radius: float = 1.0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def kind(self) -> str:
        return "waypoint"


@dataclass(eq=False)
class WaitingQueue(Waypoint):
    """A waypoint where agents line up before proceeding."""

    direction: float = 0.0
    wait_time_s: float = 0.0
    queued_agents: List[object] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "queue"


class WaypointRegistry:
    """Owns waypoint lifetimes; clusters and agents only hold references."""

    def __init__(self, waypoints: Iterable[Waypoint] = ()) -> None:
        self._waypoints: Dict[str, Waypoint] = {}
        for waypoint in waypoints:
            self.add(waypoint)

    def add(self, waypoint: Waypoint) -> Waypoint:
        if waypoint.name in self._waypoints:
            raise ValueError(f"Duplicate waypoint name: {waypoint.name}")
        self._waypoints[waypoint.name] = waypoint
        return waypoint

    def get(self, name: str) -> Waypoint:
        try:
            return self._waypoints[name]
        except KeyError:
            raise KeyError(f"Unknown waypoint: {name}") from None

    def remove(self, name: str) -> Waypoint:
        return self._waypoints.pop(name)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._waypoints
        return any(item is waypoint for waypoint in self._waypoints.values())

    def __len__(self) -> int:
        return len(self._waypoints)

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self._waypoints.values())

    def to_networkx(self) -> nx.DiGraph:
        """Return every registered waypoint as an (edgeless) graph node."""

        graph = nx.DiGraph()
        for waypoint in self._waypoints.values():
            graph.add_node(
                waypoint.name,
                position=waypoint.position,
                kind=waypoint.kind,
                radius=waypoint.radius,
            )
        return graph


def _distance(a: Navigable, b: Navigable) -> float:
    (ax, ay), (bx, by) = a.position, b.position
    return math.hypot(bx - ax, by - ay)


def route_graph(waypoints: Sequence[Navigable], mode: WaypointMode = WaypointMode.LOOP) -> nx.DiGraph:
    """Describe the order in which an agent visits ``waypoints``.

    LOOP links each waypoint to its successor and the last back to the first;
    RANDOM links every ordered pair of distinct waypoints.
    """

    graph = nx.DiGraph()
    for waypoint in waypoints:
        graph.add_node(
            waypoint.name,
            position=waypoint.position,
            kind=getattr(waypoint, "kind", "waypoint"),
        )

    if mode is WaypointMode.RANDOM:
        for source in waypoints:
            for target in waypoints:
                if source.name != target.name:
                    graph.add_edge(source.name, target.name, length_m=_distance(source, target))
        return graph

    for source, target in zip(waypoints, waypoints[1:]):
        if source.name != target.name:
            graph.add_edge(source.name, target.name, length_m=_distance(source, target))
    if len(waypoints) > 1 and waypoints[-1].name != waypoints[0].name:
        graph.add_edge(waypoints[-1].name, waypoints[0].name, length_m=_distance(waypoints[-1], waypoints[0]))
    return graph
