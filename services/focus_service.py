"""Interface of the focus service consumed by the health probe."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Mapping, Protocol

from core.addressing import BareConferenceAddress


@dataclass(frozen=True)
class RoomServiceLocator:
    """Domain of the room-hosting (MUC) service discovered by the focus."""

    domain: str


class ConferenceLogLevel(str, Enum):
    """Logging verbosity requested for a conference."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    def to_logging_level(self) -> int:
        return {
            ConferenceLogLevel.DEBUG: logging.DEBUG,
            ConferenceLogLevel.INFO: logging.INFO,
            ConferenceLogLevel.WARNING: logging.WARNING,
            ConferenceLogLevel.ERROR: logging.ERROR,
        }[self]


class FocusService(Protocol):
    """Focus service operations the probe depends on."""

    def resolve_room_service_locator(self) -> RoomServiceLocator | None:
        """Return the room service locator, or None before discovery completes."""

    def lookup_conference(self, room_name: BareConferenceAddress) -> object | None:
        """Return the conference registered under ``room_name``, if any."""

    def request_conference_creation(
        self,
        room_name: BareConferenceAddress,
        config: Mapping[str, str],
        log_level: ConferenceLogLevel,
        include_in_statistics: bool,
    ) -> bool:
        """Request a conference and return whether it was created or already owned."""
