"""Active health probe for the focus service.

The probe checks liveness by asking the focus service to create a real,
throwaway conference under a pseudo-random room name on the discovered
room (MUC) service. A check that returns normally means the focus is
healthy; every failure is raised as a ``HealthCheckError`` subclass.
"""

from __future__ import annotations

from dataclasses import dataclass
import random
import time
from typing import Any, Callable, Mapping

from config.controller import parse_bool
from core.addressing import AddressFormatError, BareConferenceAddress, normalize_local
from core.errors import (
    CollisionLimitExceededError,
    ConferenceCreationError,
    ConferenceRejectedError,
    DependencyNotReadyError,
    IdentifierGenerationError,
    ProbeConfigurationError,
)
from core.logging import log_error, logger as LOGGER
from services.focus_service import ConferenceLogLevel, FocusService

DEFAULT_NAMESPACE_TAG = "focus-health"
DEFAULT_MAX_COLLISION_RETRIES = 100

# Room names wrap the sum of the clock and the random value into 64 bits.
_ROOM_NAME_MODULUS = 1 << 64
_ROOM_NAME_HEX_DIGITS = 16

# Shared pseudo-random source for room names.
_RANDOM = random.Random()


@dataclass(frozen=True)
class FocusProbeSettings:
    """Tunables for the focus health probe.

    ``max_collision_retries`` of None means the room name loop never gives up.
    """

    namespace_tag: str = DEFAULT_NAMESPACE_TAG
    max_collision_retries: int | None = DEFAULT_MAX_COLLISION_RETRIES
    conference_log_level: ConferenceLogLevel = ConferenceLogLevel.WARNING
    include_in_statistics: bool = False

    def __post_init__(self) -> None:
        if not self.namespace_tag:
            raise ProbeConfigurationError("namespace_tag must not be empty")
        try:
            normalize_local(f"{self.namespace_tag}-{'f' * _ROOM_NAME_HEX_DIGITS}")
        except AddressFormatError as exc:
            raise ProbeConfigurationError(
                f"Invalid namespace tag {self.namespace_tag!r}: {exc}"
            ) from exc
        if self.max_collision_retries is not None and self.max_collision_retries < 1:
            raise ProbeConfigurationError(
                f"max_collision_retries must be >= 1 or None, got {self.max_collision_retries}"
            )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "FocusProbeSettings":
        """Build settings from the normalized ``health.focus`` config section."""

        try:
            log_level = ConferenceLogLevel(
                str(config.get("conference_log_level", ConferenceLogLevel.WARNING.value)).lower()
            )
        except ValueError as exc:
            raise ProbeConfigurationError(
                f"Unknown conference_log_level {config.get('conference_log_level')!r}"
            ) from exc
        retries = config.get("max_collision_retries", DEFAULT_MAX_COLLISION_RETRIES)
        try:
            include_in_statistics = parse_bool(config.get("include_in_statistics", False))
        except ValueError as exc:
            raise ProbeConfigurationError(str(exc)) from exc
        return cls(
            namespace_tag=str(config.get("namespace_tag", DEFAULT_NAMESPACE_TAG)),
            max_collision_retries=None if retries is None else int(retries),
            conference_log_level=log_level,
            include_in_statistics=include_in_statistics,
        )


class FocusHealthProbe:
    """Checks the health of a focus service by creating a conference."""

    def __init__(
        self,
        focus_service: FocusService | None = None,
        *,
        settings: FocusProbeSettings | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._focus_service: FocusService | None = None
        self.settings = settings if settings is not None else FocusProbeSettings()
        self._rng = rng if rng is not None else _RANDOM
        self._clock = clock if clock is not None else time.time
        if focus_service is not None:
            self.bind(focus_service)

    @property
    def is_bound(self) -> bool:
        return self._focus_service is not None

    def bind(self, focus_service: FocusService | None) -> None:
        """Attach the focus service to check."""

        if focus_service is None:
            raise ProbeConfigurationError("Can not find focus service.")
        self._focus_service = focus_service
        LOGGER.debug("[FocusHealth] Bound to focus service %r", focus_service)

    def unbind(self) -> None:
        """Release the focus service. Safe to call more than once."""

        if self._focus_service is not None:
            LOGGER.debug("[FocusHealth] Unbound from focus service %r", self._focus_service)
        self._focus_service = None

    def perform_check(self) -> None:
        """Run one check; raise if the focus service is not healthy."""

        focus_service = self._focus_service
        if focus_service is None:
            raise ProbeConfigurationError("Focus service is not set.")

        locator = focus_service.resolve_room_service_locator()
        if locator is None:
            log_error(
                "[FocusHealth] No MUC service found on XMPP domain or focus has not"
                " finished initial components discovery yet"
            )
            raise DependencyNotReadyError("No MUC component")

        room_name = self._find_free_room_name(focus_service, locator.domain)

        try:
            created = focus_service.request_conference_creation(
                room_name,
                {},
                self.settings.conference_log_level,
                self.settings.include_in_statistics,
            )
        except Exception as exc:
            raise ConferenceRejectedError(
                f"Conference request for room name {room_name} raised: {exc}",
                room_name=room_name,
            ) from exc

        if not created:
            raise ConferenceCreationError(
                f"Failed to create conference with room name {room_name}",
                room_name=room_name,
            )
        LOGGER.debug("[FocusHealth] Created conference %s", room_name)

    def generate_room_name(self) -> str:
        """Return a pseudo-random room local part; not guaranteed to be unique."""

        now_ms = int(self._clock() * 1000)
        value = (now_ms + self._rng.getrandbits(64)) % _ROOM_NAME_MODULUS
        return f"{self.settings.namespace_tag}-{value:x}"

    def _find_free_room_name(self, focus_service: FocusService, domain: str) -> BareConferenceAddress:
        limit = self.settings.max_collision_retries
        collisions = 0
        while True:
            try:
                room_name = BareConferenceAddress.from_parts(self.generate_room_name(), domain)
            except AddressFormatError as exc:
                LOGGER.exception("[FocusHealth] Could not build room name on %s", domain)
                raise IdentifierGenerationError(
                    f"Could not build room name on domain {domain!r}: {exc}"
                ) from exc

            if focus_service.lookup_conference(room_name) is None:
                return room_name

            collisions += 1
            LOGGER.debug("[FocusHealth] Room name %s already in use (collision %d)", room_name, collisions)
            if limit is not None and collisions >= limit:
                raise CollisionLimitExceededError(
                    f"No free room name after {collisions} attempts on {domain}",
                    room_name=room_name,
                )


def check(focus_service: FocusService, settings: FocusProbeSettings | None = None) -> None:
    """Check the health of ``focus_service`` once."""

    FocusHealthProbe(focus_service, settings=settings).perform_check()
