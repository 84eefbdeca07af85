"""Scene registry that owns the live agent population."""

from __future__ import annotations

import logging
from typing import Callable, List, Protocol

from .agents import Agent

logger = logging.getLogger(__name__)


class SceneRegistry(Protocol):
    """What a cluster needs from the scene: somewhere to put new agents."""

    def add_agent(self, agent: Agent) -> None: ...


class Scene:
    """In-memory scene holding every live agent in insertion order."""

    def __init__(self) -> None:
        self._agents: List[Agent] = []
        self._callbacks: List[Callable[..., None]] = []

    @property
    def agents(self) -> List[Agent]:
        return list(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    def register_callback(self, callback: Callable[..., None]) -> None:
        """Register a callback invoked as ``callback(event_type, agent)``.

        Event types are ``"agent_added"`` and ``"agent_removed"``.
        """
        self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[..., None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify(self, event_type: str, agent: Agent) -> None:
        for callback in list(self._callbacks):
            callback(event_type, agent)

    def add_agent(self, agent: Agent) -> None:
        if any(existing is agent for existing in self._agents):
            raise ValueError(f"Agent {agent.name} is already part of the scene")
        self._agents.append(agent)
        logger.debug("Added %s to scene (%d agents)", agent.name, len(self._agents))
        self._notify("agent_added", agent)

    def remove_agent(self, agent: Agent) -> bool:
        for idx, existing in enumerate(self._agents):
            if existing is agent:
                del self._agents[idx]
                self._notify("agent_removed", agent)
                return True
        return False
