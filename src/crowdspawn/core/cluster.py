"""Agent clusters: templates that spawn a group of pedestrians at once."""

from __future__ import annotations

import logging
import math
import random
from typing import Callable, List, Optional, Sequence, Tuple

import networkx as nx

from .agents import Agent, AgentStateMachine
from .config import BehaviourConfig
from .constants import AgentType, WaypointMode
from .errors import InvalidCapabilityError, InvalidClusterConfigurationError
from .ids import AgentIdAllocator, default_allocator
from .scene import SceneRegistry
from .waypoints import Navigable, WaitingQueue, route_graph

logger = logging.getLogger(__name__)


def _require_navigable(item: object) -> Navigable:
    if not isinstance(item, Navigable):
        raise InvalidCapabilityError(
            f"{type(item).__name__} cannot be used as a waypoint",
            received=type(item).__name__,
        )
    return item


def _check_extent(value: float, axis: str) -> float:
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise InvalidClusterConfigurationError(
            f"Distribution {axis} must be a finite non-negative number, got {value}",
            {axis: value},
        )
    return value


class AgentCluster:
    """Group-level configuration from which agents are spawned.

    A cluster is never simulated itself. Scenario setup creates it, adjusts
    it, then calls :meth:`dissolve` to turn it into independent agents that
    are handed to the scene. Agents keep no reference back to the cluster.

    Observers registered with :meth:`register_callback` are called as
    ``callback(event_type, *payload)`` with ``("position_changed", x, y)``
    and ``("type_changed", agent_type)``. Changing the distribution footprint
    does not notify.

    Clusters built without an ``id_allocator`` synthesise ids from the
    module-level ``ids.default_allocator``, which every such cluster in the
    process shares. Pass the scenario's own allocator to keep ids isolated.
    """

    def __init__(
        self,
        x: float,
        y: float,
        count: int,
        agent_ids: Optional[Sequence[int]] = None,
        *,
        cluster_id: int = 0,
        id_allocator: AgentIdAllocator | None = None,
        rng: random.Random | None = None,
        scene: SceneRegistry | None = None,
        config: BehaviourConfig | None = None,
    ) -> None:
        if count < 0:
            raise InvalidClusterConfigurationError(f"Cluster count must be non-negative, got {count}")

        self.id = cluster_id
        self.id_allocator = id_allocator or default_allocator
        self.rng = rng or random.Random()
        self.scene = scene
        self._callbacks: List[Callable[..., None]] = []

        if agent_ids is None or len(agent_ids) != count:
            if agent_ids is not None:
                logger.warning(
                    "Cluster %s: %d agent ids supplied for %d agents, synthesising new ids",
                    cluster_id,
                    len(agent_ids),
                    count,
                )
            self.agent_ids: List[int] = self.id_allocator.allocate(count)
        else:
            self.agent_ids = list(agent_ids)
            self.id_allocator.reserve(self.agent_ids)

        self.x = float(x)
        self.y = float(y)
        self.count = count
        self.distribution_width = 0.0
        self.distribution_height = 0.0
        self.waypoints: List[Navigable] = []

        config = config or BehaviourConfig()
        self.agent_type = config.agent_type
        self.shall_create_groups = config.shall_create_groups
        self.force_factor_desired = config.force_factor_desired
        self.force_factor_social = config.force_factor_social
        self.force_factor_obstacle = config.force_factor_obstacle
        self.vmax = self.rng.normalvariate(config.vmax_mean, config.vmax_sigma)
        self.chatting_probability = config.chatting_probability
        self.tell_story_probability = config.tell_story_probability
        self.group_talking_probability = config.group_talking_probability
        self.talking_and_walking_probability = config.talking_and_walking_probability
        self.max_talking_distance = config.max_talking_distance
        self.waypoint_mode = config.waypoint_mode
        self.state_talking_base_time = config.state_talking_base_time
        self.state_tell_story_base_time = config.state_tell_story_base_time
        self.state_group_talking_base_time = config.state_group_talking_base_time
        self.state_talking_and_walking_base_time = config.state_talking_and_walking_base_time

    def __str__(self) -> str:
        return f"AgentCluster (@{self.x:g},{self.y:g})"

    # observers

    def register_callback(self, callback: Callable[..., None]) -> None:
        self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[..., None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify(self, event_type: str, *payload: object) -> None:
        for callback in list(self._callbacks):
            callback(event_type, *payload)

    # placement

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def set_position(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self._notify("position_changed", self.x, self.y)

    def set_x(self, x: float) -> None:
        self.x = float(x)
        self._notify("position_changed", self.x, self.y)

    def set_y(self, y: float) -> None:
        self.y = float(y)
        self._notify("position_changed", self.x, self.y)

    @property
    def visible_position(self) -> Tuple[float, float]:
        return self.position

    @visible_position.setter
    def visible_position(self, value: Tuple[float, float]) -> None:
        self.set_position(*value)

    @property
    def distribution(self) -> Tuple[float, float]:
        return (self.distribution_width, self.distribution_height)

    def set_distribution(self, width: float, height: float) -> None:
        width = _check_extent(width, "width")
        height = _check_extent(height, "height")
        self.distribution_width = width
        self.distribution_height = height

    def set_distribution_width(self, width: float) -> None:
        self.distribution_width = _check_extent(width, "width")

    def set_distribution_height(self, height: float) -> None:
        self.distribution_height = _check_extent(height, "height")

    # population

    def set_type(self, agent_type: AgentType) -> None:
        self.agent_type = AgentType(agent_type)
        self._notify("type_changed", self.agent_type)

    def set_count(self, count: int) -> None:
        """Change the spawn count. ``agent_ids`` is left untouched."""

        if count < 0:
            raise InvalidClusterConfigurationError(f"Cluster count must be non-negative, got {count}")
        self.count = count

    def set_agent_ids(self, agent_ids: Sequence[int]) -> None:
        self.agent_ids = list(agent_ids)
        self.id_allocator.reserve(self.agent_ids)

    def set_shall_create_groups(self, value: bool) -> None:
        # TODO: feed into group formation once the runtime supports pre-built groups
        self.shall_create_groups = bool(value)

    def set_waypoint_mode(self, mode: WaypointMode) -> None:
        self.waypoint_mode = WaypointMode(mode)

    # waypoints

    def add_waypoint(self, waypoint: Navigable) -> None:
        self.waypoints.append(_require_navigable(waypoint))

    def remove_waypoint(self, waypoint: Navigable) -> bool:
        """Drop every occurrence of ``waypoint``; report whether any was found."""

        kept = [item for item in self.waypoints if item is not waypoint]
        removed = len(self.waypoints) - len(kept)
        self.waypoints = kept
        return removed > 0

    def add_waiting_queue(self, queue: WaitingQueue) -> None:
        self.add_waypoint(queue)

    def remove_waiting_queue(self, queue: WaitingQueue) -> bool:
        return self.remove_waypoint(_require_navigable(queue))

    def route_graph(self) -> nx.DiGraph:
        return route_graph(self.waypoints, self.waypoint_mode)

    # spawning

    def _validate(self) -> None:
        if self.count != len(self.agent_ids):
            raise InvalidClusterConfigurationError(
                f"Cluster {self.id} expects {self.count} agents but has {len(self.agent_ids)} agent ids",
                {"count": self.count, "agent_ids": len(self.agent_ids)},
            )

    def _configure(self, agent: Agent, x: float, y: float) -> None:
        agent.set_position(x, y)
        agent.initial_x = x
        agent.initial_y = y
        agent.set_type(self.agent_type)
        agent.set_vmax(self.vmax)
        agent.vmax_default = self.vmax
        agent.chatting_probability = self.chatting_probability
        agent.tell_story_probability = self.tell_story_probability
        agent.group_talking_probability = self.group_talking_probability
        agent.talking_and_walking_probability = self.talking_and_walking_probability
        agent.state_machine = AgentStateMachine(
            state_talking_base_time=self.state_talking_base_time,
            state_tell_story_base_time=self.state_tell_story_base_time,
            state_group_talking_base_time=self.state_group_talking_base_time,
            state_talking_and_walking_base_time=self.state_talking_and_walking_base_time,
        )
        agent.max_talking_distance = self.max_talking_distance
        agent.waypoint_mode = self.waypoint_mode
        agent.set_force_factor_desired(self.force_factor_desired)
        agent.set_force_factor_social(self.force_factor_social)
        agent.set_force_factor_obstacle(self.force_factor_obstacle)
        for waypoint in self.waypoints:
            agent.add_waypoint(waypoint)

    def dissolve(
        self,
        rng: random.Random | None = None,
        scene: SceneRegistry | None = None,
    ) -> List[Agent]:
        """Spawn ``count`` agents, register each with the scene, return them.

        Positions are jittered uniformly inside the distribution footprint
        centred on the cluster. An axis with zero extent takes no random draw,
        so agents sit exactly on the centroid along it.

        Only the configuration check runs before anything is spawned. If the
        scene rejects an agent part-way through, the agents registered before
        it stay in the scene and the error propagates.
        """

        self._validate()
        rng = rng or self.rng
        if scene is None:
            scene = self.scene
        if scene is None:
            raise InvalidClusterConfigurationError(f"Cluster {self.id} has no scene to spawn into")

        half_w = self.distribution_width / 2
        half_h = self.distribution_height / 2

        agents: List[Agent] = []
        for i in range(self.count):
            agent = Agent(i, f"person_{self.agent_ids[i]}")

            x, y = self.x, self.y
            if self.distribution_width != 0:
                x += rng.uniform(-half_w, half_w)
            if self.distribution_height != 0:
                y += rng.uniform(-half_h, half_h)

            self._configure(agent, x, y)
            logger.debug("Spawned %s at (%.3f, %.3f)", agent.name, x, y)

            scene.add_agent(agent)
            agents.append(agent)

        logger.info("Cluster %s dissolved into %d agents", self.id, len(agents))
        return agents
