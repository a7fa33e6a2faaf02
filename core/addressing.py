"""Bare conference addresses (``local@domain``) used to name conferences."""

from __future__ import annotations

from dataclasses import dataclass
import unicodedata

MAX_PART_BYTES = 1023

# Characters the addressing scheme prohibits in a local part.
_LOCAL_FORBIDDEN = frozenset("\"&'/:<>@")
_DOMAIN_FORBIDDEN = frozenset("@/")


class AddressFormatError(ValueError):
    """Raised when a local part or domain cannot form a valid address."""


def _has_disallowed_codepoints(value: str) -> bool:
    for char in value:
        if char.isspace():
            return True
        if unicodedata.category(char) in {"Cc", "Cf", "Cs", "Co", "Cn"}:
            return True
    return False


def normalize_local(local: str) -> str:
    """Validate and normalize a local part."""

    local = unicodedata.normalize("NFKC", local).lower()
    if not local:
        raise AddressFormatError("Local part must not be empty")
    if len(local.encode("utf-8")) > MAX_PART_BYTES:
        raise AddressFormatError(f"Local part exceeds {MAX_PART_BYTES} bytes")
    forbidden = sorted(_LOCAL_FORBIDDEN.intersection(local))
    if forbidden:
        raise AddressFormatError(
            f"Local part {local!r} contains forbidden characters: {''.join(forbidden)}"
        )
    if _has_disallowed_codepoints(local):
        raise AddressFormatError(f"Local part {local!r} contains whitespace or control characters")
    return local


def normalize_domain(domain: str) -> str:
    """Validate and normalize a domain part.

    A single trailing dot (fully qualified form) is dropped.
    """

    domain = unicodedata.normalize("NFKC", domain).lower()
    if domain.endswith("."):
        domain = domain[:-1]
    if not domain:
        raise AddressFormatError("Domain must not be empty")
    if len(domain.encode("utf-8")) > MAX_PART_BYTES:
        raise AddressFormatError(f"Domain exceeds {MAX_PART_BYTES} bytes")
    if _DOMAIN_FORBIDDEN.intersection(domain) or _has_disallowed_codepoints(domain):
        raise AddressFormatError(f"Domain {domain!r} contains forbidden characters")
    if any(not label for label in domain.split(".")):
        raise AddressFormatError(f"Domain {domain!r} has an empty label")
    return domain


@dataclass(frozen=True)
class BareConferenceAddress:
    """Address naming a conference: a local part on a room-service domain."""

    local: str
    domain: str

    @classmethod
    def from_parts(cls, local: str, domain: str) -> "BareConferenceAddress":
        """Build a normalized address, raising AddressFormatError on bad input."""

        return cls(local=normalize_local(local), domain=normalize_domain(domain))

    @classmethod
    def parse(cls, value: str) -> "BareConferenceAddress":
        """Parse ``local@domain``."""

        local, sep, domain = value.partition("@")
        if not sep:
            raise AddressFormatError(f"Address {value!r} is missing the '@' separator")
        return cls.from_parts(local, domain)

    def __str__(self) -> str:
        return f"{self.local}@{self.domain}"
