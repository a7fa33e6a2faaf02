"""Diagnostics routines for the services subsystem."""

from __future__ import annotations

from core.ops_models import UnhealthyReason
from diagnostics.models import DiagnosticResult, DiagnosticStatus
from services.focus_health import FocusHealthProbe, FocusProbeSettings
from services.focus_service import FocusService
from services.health_probes import probe_focus
from services.in_memory_focus import InMemoryFocusService


def probe(
    focus_service: FocusService | None = None,
    settings: FocusProbeSettings | None = None,
) -> DiagnosticResult:
    """Run the focus health probe against a focus service.

    Args:
        focus_service: Focus service to check. Defaults to an in-memory
            focus with a discovered room service.
        settings: Optional probe settings.

    Returns:
        Diagnostic result mirroring the probe verdict. A focus still
        discovering its room service is reported as WARN.
    """

    name = "focus"
    if focus_service is None:
        focus_service = InMemoryFocusService(muc_domain="conference.localhost")

    health_probe = FocusHealthProbe(focus_service, settings=settings)
    try:
        outcome = probe_focus(health_probe)
    finally:
        health_probe.unbind()

    if outcome.healthy:
        return DiagnosticResult(name=name, status=DiagnosticStatus.PASS, details=outcome.summary)

    status = (
        DiagnosticStatus.WARN
        if outcome.reason is UnhealthyReason.DEPENDENCY_NOT_READY
        else DiagnosticStatus.FAIL
    )
    error = outcome.details.get("error", "")
    return DiagnosticResult(name=name, status=status, details=f"{outcome.summary}: {error}")
