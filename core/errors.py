"""Exceptions raised by the focus health probe."""

from __future__ import annotations

from core.ops_models import UnhealthyReason


class ProbeConfigurationError(RuntimeError):
    """Probe used outside its bind/unbind lifecycle or misconfigured."""


class HealthCheckError(RuntimeError):
    """A check run determined that the focus service is not healthy."""

    reason: UnhealthyReason = UnhealthyReason.CONFERENCE_CREATION_FAILED

    def __init__(self, message: str, room_name: object | None = None) -> None:
        super().__init__(message)
        self.room_name = room_name


class DependencyNotReadyError(HealthCheckError):
    reason = UnhealthyReason.DEPENDENCY_NOT_READY


class IdentifierGenerationError(HealthCheckError):
    reason = UnhealthyReason.IDENTIFIER_GENERATION_FAILED


class ConferenceCreationError(HealthCheckError):
    reason = UnhealthyReason.CONFERENCE_CREATION_FAILED


class ConferenceRejectedError(HealthCheckError):
    reason = UnhealthyReason.CONFERENCE_CREATION_REJECTED


class CollisionLimitExceededError(HealthCheckError):
    reason = UnhealthyReason.COLLISION_LIMIT_EXCEEDED
