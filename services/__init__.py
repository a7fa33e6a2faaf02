"""Focus service interface and the focus health probe."""

from services.focus_health import FocusHealthProbe, FocusProbeSettings, check
from services.focus_service import ConferenceLogLevel, FocusService, RoomServiceLocator

__all__ = [
    "ConferenceLogLevel",
    "FocusHealthProbe",
    "FocusProbeSettings",
    "FocusService",
    "RoomServiceLocator",
    "check",
]
