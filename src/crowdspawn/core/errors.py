"""Exception types raised while configuring and spawning agent clusters."""

from __future__ import annotations

from typing import Any, Dict


class CrowdSpawnError(Exception):
    """Base error for all cluster spawning failures."""

    code = "CROWDSPAWN_ERROR"

    def __init__(self, message: str, details: Dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidClusterConfigurationError(CrowdSpawnError, ValueError):
    """Cluster settings cannot produce a consistent spawn batch."""

    code = "INVALID_CLUSTER_CONFIGURATION"


class InvalidCapabilityError(CrowdSpawnError, TypeError):
    """An object handed to a cluster is not navigable."""

    code = "INVALID_CAPABILITY"

    def __init__(self, message: str, received: str | None = None) -> None:
        super().__init__(message, {"received": received})
        self.received = received
