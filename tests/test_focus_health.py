"""Tests for the focus health probe."""

from __future__ import annotations

import random
from typing import Mapping

import pytest

from core.addressing import BareConferenceAddress
from core.errors import (
    CollisionLimitExceededError,
    ConferenceCreationError,
    ConferenceRejectedError,
    DependencyNotReadyError,
    HealthCheckError,
    IdentifierGenerationError,
    ProbeConfigurationError,
)
from core.ops_models import UnhealthyReason
from services.focus_health import FocusHealthProbe, FocusProbeSettings, check
from services.focus_service import ConferenceLogLevel, RoomServiceLocator


class _FakeFocusService:
    def __init__(
        self,
        domain: str | None = "rooms.example.com",
        collisions: int = 0,
        created: bool = True,
        error: Exception | None = None,
    ) -> None:
        self.domain = domain
        self.collisions = collisions
        self.created = created
        self.error = error
        self.lookups: list[BareConferenceAddress] = []
        self.requests: list[tuple[BareConferenceAddress, Mapping[str, str], ConferenceLogLevel, bool]] = []

    def resolve_room_service_locator(self) -> RoomServiceLocator | None:
        if self.domain is None:
            return None
        return RoomServiceLocator(domain=self.domain)

    def lookup_conference(self, room_name: BareConferenceAddress) -> object | None:
        self.lookups.append(room_name)
        if len(self.lookups) <= self.collisions:
            return object()
        return None

    def request_conference_creation(self, room_name, config, log_level, include_in_statistics) -> bool:
        self.requests.append((room_name, config, log_level, include_in_statistics))
        if self.error is not None:
            raise self.error
        return self.created


def test_perform_check_succeeds_on_first_free_name() -> None:
    focus = _FakeFocusService()
    probe = FocusHealthProbe(focus)

    assert probe.perform_check() is None

    assert len(focus.lookups) == 1
    assert len(focus.requests) == 1
    room_name, config, log_level, include_in_statistics = focus.requests[0]
    assert room_name == focus.lookups[0]
    assert room_name.domain == "rooms.example.com"
    assert room_name.local.startswith("focus-health-")
    assert dict(config) == {}
    assert log_level is ConferenceLogLevel.WARNING
    assert include_in_statistics is False


def test_perform_check_regenerates_name_after_collisions() -> None:
    focus = _FakeFocusService(collisions=3)
    probe = FocusHealthProbe(focus)

    probe.perform_check()

    assert len(focus.lookups) == 4
    assert len(set(focus.lookups)) == 4
    assert len(focus.requests) == 1
    assert focus.requests[0][0] == focus.lookups[3]


def test_missing_room_service_reports_dependency_not_ready() -> None:
    focus = _FakeFocusService(domain=None)
    probe = FocusHealthProbe(focus)

    with pytest.raises(DependencyNotReadyError) as excinfo:
        probe.perform_check()

    assert excinfo.value.reason is UnhealthyReason.DEPENDENCY_NOT_READY
    assert focus.lookups == []
    assert focus.requests == []


def test_failed_creation_reports_room_name() -> None:
    focus = _FakeFocusService(created=False)
    probe = FocusHealthProbe(focus)

    with pytest.raises(ConferenceCreationError) as excinfo:
        probe.perform_check()

    room_name = focus.requests[0][0]
    assert str(room_name) in str(excinfo.value)
    assert excinfo.value.room_name == room_name
    assert excinfo.value.reason is UnhealthyReason.CONFERENCE_CREATION_FAILED
    assert len(focus.requests) == 1


def test_raising_creation_is_reported_as_rejected() -> None:
    cause = ConnectionError("focus went away")
    focus = _FakeFocusService(error=cause)
    probe = FocusHealthProbe(focus)

    with pytest.raises(ConferenceRejectedError) as excinfo:
        probe.perform_check()

    assert excinfo.value.__cause__ is cause
    assert excinfo.value.reason is UnhealthyReason.CONFERENCE_CREATION_REJECTED


def test_collision_limit_stops_the_loop() -> None:
    focus = _FakeFocusService(collisions=1000)
    probe = FocusHealthProbe(focus, settings=FocusProbeSettings(max_collision_retries=5))

    with pytest.raises(CollisionLimitExceededError):
        probe.perform_check()

    assert len(focus.lookups) == 5
    assert focus.requests == []


def test_unbounded_loop_keeps_looking() -> None:
    focus = _FakeFocusService(collisions=250)
    probe = FocusHealthProbe(focus, settings=FocusProbeSettings(max_collision_retries=None))

    probe.perform_check()

    assert len(focus.lookups) == 251
    assert len(focus.requests) == 1


def test_malformed_domain_reports_identifier_generation_failure() -> None:
    focus = _FakeFocusService(domain="bad domain")
    probe = FocusHealthProbe(focus)

    with pytest.raises(IdentifierGenerationError):
        probe.perform_check()

    assert focus.requests == []


def test_unbound_probe_raises_configuration_error() -> None:
    probe = FocusHealthProbe()

    with pytest.raises(ProbeConfigurationError):
        probe.perform_check()


def test_configuration_error_is_not_a_health_failure() -> None:
    assert not issubclass(ProbeConfigurationError, HealthCheckError)


def test_bind_rejects_missing_focus_service() -> None:
    probe = FocusHealthProbe()

    with pytest.raises(ProbeConfigurationError):
        probe.bind(None)
    assert probe.is_bound is False


def test_bind_unbind_lifecycle() -> None:
    focus = _FakeFocusService()
    probe = FocusHealthProbe()

    probe.bind(focus)
    assert probe.is_bound is True
    probe.perform_check()

    probe.unbind()
    probe.unbind()
    assert probe.is_bound is False
    with pytest.raises(ProbeConfigurationError):
        probe.perform_check()

    probe.bind(focus)
    probe.perform_check()
    assert len(focus.requests) == 2


def test_probe_stays_usable_after_failure() -> None:
    focus = _FakeFocusService(created=False)
    probe = FocusHealthProbe(focus)

    with pytest.raises(ConferenceCreationError):
        probe.perform_check()

    focus.created = True
    probe.perform_check()
    assert len(focus.requests) == 2


def test_consecutive_checks_use_different_room_names() -> None:
    focus = _FakeFocusService()
    probe = FocusHealthProbe(focus, clock=lambda: 1_700_000_000.0)

    probe.perform_check()
    probe.perform_check()

    assert focus.requests[0][0] != focus.requests[1][0]


def test_generate_room_name_wraps_to_64_bits() -> None:
    rng = random.Random(7)
    expected = (1_000 + random.Random(7).getrandbits(64)) % (1 << 64)
    probe = FocusHealthProbe(rng=rng, clock=lambda: 1.0)

    assert probe.generate_room_name() == f"focus-health-{expected:x}"


def test_settings_are_passed_to_creation() -> None:
    focus = _FakeFocusService()
    settings = FocusProbeSettings(
        namespace_tag="synthetic",
        conference_log_level=ConferenceLogLevel.ERROR,
        include_in_statistics=True,
    )

    check(focus, settings=settings)

    room_name, _config, log_level, include_in_statistics = focus.requests[0]
    assert room_name.local.startswith("synthetic-")
    assert log_level is ConferenceLogLevel.ERROR
    assert include_in_statistics is True


@pytest.mark.parametrize("tag", ["bad tag", "user@host", "", "a/b", "a" * 1010])
def test_settings_reject_invalid_namespace_tag(tag: str) -> None:
    with pytest.raises(ProbeConfigurationError):
        FocusProbeSettings(namespace_tag=tag)


def test_settings_reject_non_positive_retry_limit() -> None:
    with pytest.raises(ProbeConfigurationError):
        FocusProbeSettings(max_collision_retries=0)


def test_settings_from_config() -> None:
    settings = FocusProbeSettings.from_config(
        {
            "namespace_tag": "probe",
            "max_collision_retries": None,
            "conference_log_level": "INFO",
            "include_in_statistics": True,
        }
    )

    assert settings.namespace_tag == "probe"
    assert settings.max_collision_retries is None
    assert settings.conference_log_level is ConferenceLogLevel.INFO
    assert settings.include_in_statistics is True


def test_settings_from_config_rejects_unknown_log_level() -> None:
    with pytest.raises(ProbeConfigurationError):
        FocusProbeSettings.from_config({"conference_log_level": "loud"})


def test_longest_accepted_tag_still_builds_room_names() -> None:
    focus = _FakeFocusService()
    probe = FocusHealthProbe(
        focus,
        settings=FocusProbeSettings(namespace_tag="a" * 1006),
        rng=random.Random(3),
    )

    probe.perform_check()

    room_name = focus.requests[0][0]
    assert len(room_name.local.encode("utf-8")) <= 1023


def test_settings_from_config_parses_quoted_flags() -> None:
    assert FocusProbeSettings.from_config({"include_in_statistics": "false"}).include_in_statistics is False
    assert FocusProbeSettings.from_config({"include_in_statistics": "Yes"}).include_in_statistics is True


def test_settings_from_config_rejects_unparseable_flag() -> None:
    with pytest.raises(ProbeConfigurationError):
        FocusProbeSettings.from_config({"include_in_statistics": "sometimes"})


def test_missing_room_service_is_logged_as_error(monkeypatch) -> None:
    messages: list[str] = []
    monkeypatch.setattr("services.focus_health.log_error", messages.append)

    with pytest.raises(DependencyNotReadyError):
        FocusHealthProbe(_FakeFocusService(domain=None)).perform_check()

    assert len(messages) == 1
    assert "No MUC service found" in messages[0]
