"""Default behaviour settings copied onto every new cluster."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from .constants import AgentType, WaypointMode


@dataclass
class BehaviourConfig:
    """Group-level defaults for social-force weights and social behaviour."""

    force_factor_desired: float = 1.0
    force_factor_social: float = 2.0
    force_factor_obstacle: float = 10.0
    chatting_probability: float = 0.1
    tell_story_probability: float = 0.001
    group_talking_probability: float = 0.001
    talking_and_walking_probability: float = 0.001
    max_talking_distance: float = 0.001
    state_talking_base_time: float = 6.0
    state_tell_story_base_time: float = 6.0
    state_group_talking_base_time: float = 6.0
    state_talking_and_walking_base_time: float = 6.0
    # vmax is drawn once per cluster from N(mean, sigma)
    vmax_mean: float = 0.6
    vmax_sigma: float = 0.2
    waypoint_mode: WaypointMode = WaypointMode.LOOP
    agent_type: AgentType = AgentType.ADULT
    shall_create_groups: bool = True

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "BehaviourConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(raw).difference(known)
        if unknown:
            raise ValueError(f"Unknown behaviour settings: {', '.join(sorted(unknown))}")

        values = dict(raw)
        if "waypoint_mode" in values:
            values["waypoint_mode"] = WaypointMode(values["waypoint_mode"])
        if "agent_type" in values:
            values["agent_type"] = AgentType(values["agent_type"])
        if "shall_create_groups" in values:
            values["shall_create_groups"] = bool(values["shall_create_groups"])
        for key in known - {"waypoint_mode", "agent_type", "shall_create_groups"}:
            if key in values:
                values[key] = float(values[key])
        if values.get("vmax_sigma", 0.0) < 0:
            raise ValueError("vmax_sigma must be non-negative")
        return cls(**values)
