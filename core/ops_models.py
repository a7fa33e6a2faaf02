"""Models for probe outcomes and health verdicts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ProbeVerdict(str, Enum):
    """Binary health classification for one probe run."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class UnhealthyReason(str, Enum):
    """Why a probe run was judged unhealthy."""

    DEPENDENCY_NOT_READY = "dependency_not_ready"
    IDENTIFIER_GENERATION_FAILED = "identifier_generation_failed"
    CONFERENCE_CREATION_FAILED = "conference_creation_failed"
    CONFERENCE_CREATION_REJECTED = "conference_creation_rejected"
    COLLISION_LIMIT_EXCEEDED = "collision_limit_exceeded"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single focus health probe run."""

    timestamp: float
    verdict: ProbeVerdict
    summary: str
    reason: UnhealthyReason | None = None
    details: Mapping[str, str | float | int] = field(default_factory=dict)

    @property
    def healthy(self) -> bool:
        return self.verdict is ProbeVerdict.HEALTHY


def healthy_outcome(
    timestamp: float,
    summary: str,
    details: Mapping[str, str | float | int] | None = None,
) -> ProbeOutcome:
    return ProbeOutcome(
        timestamp=timestamp,
        verdict=ProbeVerdict.HEALTHY,
        summary=summary,
        details=dict(details or {}),
    )


def unhealthy_outcome(
    timestamp: float,
    reason: UnhealthyReason,
    summary: str,
    details: Mapping[str, str | float | int] | None = None,
) -> ProbeOutcome:
    return ProbeOutcome(
        timestamp=timestamp,
        verdict=ProbeVerdict.UNHEALTHY,
        summary=summary,
        reason=reason,
        details=dict(details or {}),
    )
