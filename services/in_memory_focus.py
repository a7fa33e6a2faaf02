"""In-memory focus service for offline diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from core.addressing import BareConferenceAddress
from core.logging import logger as LOGGER
from services.focus_service import ConferenceLogLevel, RoomServiceLocator


@dataclass(frozen=True)
class InMemoryConference:
    """Conference registered with the in-memory focus service."""

    room_name: BareConferenceAddress
    config: Mapping[str, str]
    log_level: ConferenceLogLevel
    include_in_statistics: bool


@dataclass
class InMemoryFocusService:
    """Fake focus service keeping conferences in a dictionary.

    ``muc_domain`` stays None until discovery completes. When
    ``accept_requests`` is False every creation request is refused. The
    next ``simulated_collisions`` lookups report a conference for any name.
    """

    muc_domain: str | None = None
    accept_requests: bool = True
    simulated_collisions: int = 0
    conferences: dict[BareConferenceAddress, InMemoryConference] = field(default_factory=dict)
    creation_requests: list[BareConferenceAddress] = field(default_factory=list)
    lookups: list[BareConferenceAddress] = field(default_factory=list)

    def discover(self, domain: str) -> None:
        """Simulate completion of room service discovery."""

        self.muc_domain = domain

    def resolve_room_service_locator(self) -> RoomServiceLocator | None:
        if self.muc_domain is None:
            return None
        return RoomServiceLocator(domain=self.muc_domain)

    def lookup_conference(self, room_name: BareConferenceAddress) -> InMemoryConference | None:
        self.lookups.append(room_name)
        if self.simulated_collisions > 0:
            self.simulated_collisions -= 1
            return self.conferences.get(room_name) or InMemoryConference(
                room_name=room_name,
                config={},
                log_level=ConferenceLogLevel.INFO,
                include_in_statistics=True,
            )
        return self.conferences.get(room_name)

    def request_conference_creation(
        self,
        room_name: BareConferenceAddress,
        config: Mapping[str, str],
        log_level: ConferenceLogLevel,
        include_in_statistics: bool,
    ) -> bool:
        self.creation_requests.append(room_name)
        if not self.accept_requests:
            return False
        if room_name not in self.conferences:
            self.conferences[room_name] = InMemoryConference(
                room_name=room_name,
                config=dict(config),
                log_level=log_level,
                include_in_statistics=include_in_statistics,
            )
            LOGGER.log(log_level.to_logging_level(), "[InMemoryFocus] Created conference %s", room_name)
        return True

    def register(self, room_name: BareConferenceAddress) -> InMemoryConference:
        """Register a conference directly, bypassing creation requests."""

        conference = InMemoryConference(
            room_name=room_name,
            config={},
            log_level=ConferenceLogLevel.INFO,
            include_in_statistics=True,
        )
        self.conferences[room_name] = conference
        return conference
