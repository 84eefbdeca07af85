"""Agent definitions produced when a cluster is dissolved."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .constants import AgentType, WaypointMode
from .waypoints import Navigable


@dataclass
class AgentStateMachine:
    """Base durations (seconds) of the social states an agent can enter."""

    state_talking_base_time: float = 6.0
    state_tell_story_base_time: float = 6.0
    state_group_talking_base_time: float = 6.0
    state_talking_and_walking_base_time: float = 6.0


@dataclass
class Agent:
    """A single simulated pedestrian.

    The simulation runtime steps agents; this module only defines the
    parameters they are initialised with.
    """

    index: int
    name: str
    x: float = 0.0
    y: float = 0.0
    initial_x: float = 0.0
    initial_y: float = 0.0
    agent_type: AgentType = AgentType.ADULT
    vmax: float = 0.0
    vmax_default: float = 0.0
    force_factor_desired: float = 1.0
    force_factor_social: float = 1.0
    force_factor_obstacle: float = 1.0
    chatting_probability: float = 0.0
    tell_story_probability: float = 0.0
    group_talking_probability: float = 0.0
    talking_and_walking_probability: float = 0.0
    max_talking_distance: float = 0.0
    waypoint_mode: WaypointMode = WaypointMode.LOOP
    waypoints: List[Navigable] = field(default_factory=list)
    state_machine: AgentStateMachine = field(default_factory=AgentStateMachine)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def initial_position(self) -> Tuple[float, float]:
        return (self.initial_x, self.initial_y)

    def set_position(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def set_type(self, agent_type: AgentType) -> None:
        self.agent_type = agent_type

    def set_vmax(self, vmax: float) -> None:
        self.vmax = vmax

    def set_force_factor_desired(self, value: float) -> None:
        self.force_factor_desired = value

    def set_force_factor_social(self, value: float) -> None:
        self.force_factor_social = value

    def set_force_factor_obstacle(self, value: float) -> None:
        self.force_factor_obstacle = value

    def add_waypoint(self, waypoint: Navigable) -> None:
        self.waypoints.append(waypoint)
