"""Health probes for operational monitoring."""

from __future__ import annotations

import time
from typing import Callable

from core.errors import HealthCheckError
from core.logging import log_probe_outcome
from core.ops_models import ProbeOutcome, healthy_outcome, unhealthy_outcome
from services.focus_health import FocusHealthProbe


def probe_focus(
    probe: FocusHealthProbe,
    clock: Callable[[], float] = time.time,
) -> ProbeOutcome:
    """Run the focus health probe once and report the verdict.

    Health failures become an unhealthy outcome. A ``ProbeConfigurationError``
    is not a health signal and propagates to the caller.
    """

    try:
        probe.perform_check()
    except HealthCheckError as exc:
        details: dict[str, str | float | int] = {"error": str(exc)}
        if exc.room_name is not None:
            details["room_name"] = str(exc.room_name)
        outcome = unhealthy_outcome(
            timestamp=clock(),
            reason=exc.reason,
            summary=f"Focus unhealthy ({exc.reason.value})",
            details=details,
        )
    else:
        outcome = healthy_outcome(
            timestamp=clock(),
            summary="Focus created a conference",
        )

    log_probe_outcome("focus", outcome.healthy, outcome.summary, outcome.details)
    return outcome
