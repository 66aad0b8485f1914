"""Shared domain models used across keyhealth."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple, Union


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC, treating naive datetimes as already UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def as_aware(value: datetime) -> datetime:
    """Return ``value`` unchanged if it has a timezone, otherwise as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True, slots=True)
class Signature:
    """The fields of a self-signature that matter for key health."""

    key_lifetime_secs: Optional[int] = None
    flags_valid: bool = False
    flag_encrypt_communications: bool = False
    flag_encrypt_storage: bool = False


@dataclass(frozen=True, slots=True)
class Identity:
    name: str
    self_signature: Signature = field(default_factory=Signature)


@dataclass(frozen=True, slots=True)
class Subkey:
    key_id: int
    creation_time: datetime
    sig: Signature = field(default_factory=Signature)

    @property
    def is_encryption_capable(self) -> bool:
        has_encryption_flag = self.sig.flag_encrypt_communications or self.sig.flag_encrypt_storage
        return self.sig.flags_valid and has_encryption_flag


@dataclass(frozen=True, slots=True)
class Key:
    """An already-parsed key: primary key creation time, identities and subkeys."""

    creation_time: datetime
    identities: Tuple[Identity, ...] = ()
    subkeys: Tuple[Subkey, ...] = ()


@dataclass(frozen=True, slots=True)
class NoExpiry:
    @property
    def has_expiry(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class ExpiresAt:
    time: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", as_utc(self.time))

    @property
    def has_expiry(self) -> bool:
        return True


NO_EXPIRY = NoExpiry()

Expiry = Union[NoExpiry, ExpiresAt]


def format_key_id(key_id: int) -> str:
    return f"{key_id:016X}"


__all__ = [
    "Signature",
    "Identity",
    "Subkey",
    "Key",
    "NoExpiry",
    "ExpiresAt",
    "NO_EXPIRY",
    "Expiry",
    "as_utc",
    "as_aware",
    "format_key_id",
]
