"""Tests for behaviour configuration loading."""

from __future__ import annotations

import pytest

from crowdspawn.core.config import BehaviourConfig
from crowdspawn.core.constants import AgentType, WaypointMode


def test_from_dict_coerces_values() -> None:
    config = BehaviourConfig.from_dict(
        {
            "force_factor_social": 3,
            "agent_type": "child",
            "waypoint_mode": "random",
            "shall_create_groups": 0,
        }
    )

    assert config.force_factor_social == 3.0
    assert isinstance(config.force_factor_social, float)
    assert config.agent_type is AgentType.CHILD
    assert config.waypoint_mode is WaypointMode.RANDOM
    assert config.shall_create_groups is False
    assert config.chatting_probability == 0.1


def test_from_dict_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="vmax_median"):
        BehaviourConfig.from_dict({"vmax_median": 1.0})


def test_from_dict_rejects_bad_enum_and_sigma() -> None:
    with pytest.raises(ValueError):
        BehaviourConfig.from_dict({"agent_type": "cyclist"})
    with pytest.raises(ValueError):
        BehaviourConfig.from_dict({"vmax_sigma": -0.1})
