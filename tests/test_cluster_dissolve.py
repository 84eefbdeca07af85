"""Tests for spawning agents out of a cluster."""

from __future__ import annotations

import random
from typing import List

import pytest

from crowdspawn.core.agents import Agent
from crowdspawn.core.cluster import AgentCluster
from crowdspawn.core.constants import AgentType, WaypointMode
from crowdspawn.core.errors import InvalidClusterConfigurationError
from crowdspawn.core.ids import AgentIdAllocator
from crowdspawn.core.scene import Scene
from crowdspawn.core.waypoints import WaitingQueue, Waypoint


class RecordingScene:
    def __init__(self) -> None:
        self.added: List[Agent] = []

    def add_agent(self, agent: Agent) -> None:
        self.added.append(agent)


def _cluster(count: int = 3, agent_ids=None, seed: int = 7, **kwargs) -> AgentCluster:
    return AgentCluster(
        10.0,
        10.0,
        count,
        agent_ids,
        id_allocator=AgentIdAllocator(),
        rng=random.Random(seed),
        **kwargs,
    )


def test_example_cluster_spawns_on_centroid() -> None:
    scene = RecordingScene()
    w1 = Waypoint("w1", 0.0, 0.0)
    w2 = Waypoint("w2", 20.0, 5.0)
    cluster = _cluster(agent_ids=[101, 102, 103], scene=scene)
    cluster.set_type(AgentType.ADULT)
    cluster.add_waypoint(w1)
    cluster.add_waypoint(w2)

    agents = cluster.dissolve()

    assert [a.name for a in agents] == ["person_101", "person_102", "person_103"]
    assert [a.index for a in agents] == [0, 1, 2]
    for agent in agents:
        assert agent.position == (10.0, 10.0)
        assert agent.initial_position == (10.0, 10.0)
        assert agent.agent_type is AgentType.ADULT
        assert len(agent.waypoints) == 2
        assert agent.waypoints[0] is w1
        assert agent.waypoints[1] is w2


def test_every_agent_registered_exactly_once_in_spawn_order() -> None:
    scene = RecordingScene()
    cluster = _cluster(count=5, scene=scene)
    cluster.set_distribution(4.0, 2.0)

    agents = cluster.dissolve()

    assert len(agents) == 5
    assert len(scene.added) == 5
    assert all(a is b for a, b in zip(agents, scene.added))


def test_zero_footprint_consumes_no_random_draws() -> None:
    rng = random.Random(3)
    cluster = _cluster(count=4, scene=RecordingScene())
    state = rng.getstate()

    cluster.dissolve(rng=rng)

    assert rng.getstate() == state


def test_zero_height_keeps_y_on_centroid() -> None:
    cluster = _cluster(count=50, scene=RecordingScene())
    cluster.set_distribution(6.0, 0.0)

    agents = cluster.dissolve()

    assert all(a.y == 10.0 for a in agents)
    assert all(7.0 <= a.x <= 13.0 for a in agents)
    assert len({a.x for a in agents}) > 1


def test_single_axis_draws_once_per_agent() -> None:
    rng = random.Random(11)
    expected = random.Random(11)
    cluster = _cluster(count=3, scene=RecordingScene())
    cluster.set_distribution(0.0, 2.0)

    agents = cluster.dissolve(rng=rng)

    assert [a.y for a in agents] == [10.0 + expected.uniform(-1.0, 1.0) for _ in range(3)]
    assert all(a.x == 10.0 for a in agents)


def test_repeated_dissolve_shares_behaviour_but_jitters_positions() -> None:
    scene = Scene()
    cluster = _cluster(count=6, scene=scene)
    cluster.set_distribution(3.0, 3.0)

    first = cluster.dissolve()
    second = cluster.dissolve()

    assert len(scene) == 12
    assert {a.vmax for a in first + second} == {cluster.vmax}
    assert [a.force_factor_social for a in first] == [a.force_factor_social for a in second]
    assert [a.position for a in first] != [a.position for a in second]


def test_zero_footprint_positions_repeat_across_batches() -> None:
    cluster = _cluster(count=3, scene=RecordingScene())

    first = cluster.dissolve()
    second = cluster.dissolve()

    assert [a.position for a in first] == [a.position for a in second]


def test_behaviour_scalars_are_copied_by_value() -> None:
    cluster = _cluster(count=2, scene=RecordingScene())
    cluster.chatting_probability = 0.25
    cluster.state_tell_story_base_time = 9.0
    cluster.set_waypoint_mode(WaypointMode.RANDOM)

    agents = cluster.dissolve()
    cluster.chatting_probability = 0.9
    cluster.force_factor_obstacle = 1.0
    cluster.vmax = 5.0

    for agent in agents:
        assert agent.chatting_probability == 0.25
        assert agent.force_factor_desired == 1.0
        assert agent.force_factor_social == 2.0
        assert agent.force_factor_obstacle == 10.0
        assert agent.tell_story_probability == 0.001
        assert agent.max_talking_distance == 0.001
        assert agent.vmax == agent.vmax_default != 5.0
        assert agent.waypoint_mode is WaypointMode.RANDOM
        assert agent.state_machine.state_tell_story_base_time == 9.0
        assert agent.state_machine.state_talking_base_time == 6.0


def test_waiting_queues_propagate_in_list_order() -> None:
    queue = WaitingQueue("queue", 1.0, 1.0, wait_time_s=5.0)
    goal = Waypoint("goal", 2.0, 2.0)
    cluster = _cluster(count=1, scene=RecordingScene())
    cluster.add_waiting_queue(queue)
    cluster.add_waypoint(goal)

    (agent,) = cluster.dissolve()

    assert agent.waypoints == [queue, goal]
    assert agent.waypoints[0] is queue


def test_count_mismatch_fails_before_spawning_anything() -> None:
    scene = RecordingScene()
    cluster = _cluster(count=3, scene=scene)
    cluster.set_count(4)

    with pytest.raises(InvalidClusterConfigurationError) as excinfo:
        cluster.dissolve()

    assert scene.added == []
    assert excinfo.value.details == {"count": 4, "agent_ids": 3}


def test_dissolve_without_scene_is_rejected() -> None:
    cluster = _cluster(count=1)

    with pytest.raises(InvalidClusterConfigurationError):
        cluster.dissolve()


def test_scene_can_be_supplied_per_call() -> None:
    scene = Scene()
    cluster = _cluster(count=2)

    agents = cluster.dissolve(scene=scene)

    assert scene.agents == agents


def test_empty_cluster_spawns_nothing() -> None:
    scene = RecordingScene()
    cluster = _cluster(count=0, scene=scene)

    assert cluster.dissolve() == []
    assert scene.added == []


def test_spawned_agents_keep_waypoints_after_cluster_changes() -> None:
    w1 = Waypoint("w1", 0.0, 0.0)
    w2 = Waypoint("w2", 5.0, 0.0)
    cluster = _cluster(count=2, scene=RecordingScene())
    cluster.add_waypoint(w1)
    cluster.add_waypoint(w2)

    agents = cluster.dissolve()
    assert cluster.remove_waypoint(w1) is True
    cluster.add_waypoint(Waypoint("w3", 9.0, 9.0))

    for agent in agents:
        assert agent.waypoints == [w1, w2]
    assert agents[0].waypoints is not agents[1].waypoints


class RejectingScene(RecordingScene):
    def __init__(self, reject_after: int) -> None:
        super().__init__()
        self.reject_after = reject_after

    def add_agent(self, agent: Agent) -> None:
        if len(self.added) == self.reject_after:
            raise RuntimeError("scene full")
        super().add_agent(agent)


def test_scene_failure_keeps_earlier_registrations() -> None:
    scene = RejectingScene(reject_after=2)
    cluster = _cluster(count=4, scene=scene)

    with pytest.raises(RuntimeError, match="scene full"):
        cluster.dissolve()

    assert [a.name for a in scene.added] == ["person_0", "person_1"]
